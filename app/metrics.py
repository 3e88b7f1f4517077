from prometheus_client import Counter, Histogram, Gauge, generate_latest, CONTENT_TYPE_LATEST
from flask import Response, request
import logging
import time

logger = logging.getLogger("main")

# Database Metrics
db_connection_pool_checked_out = Gauge("portal_db_connections_checked_out", "Pooled connections currently in use")

db_query_duration_seconds = Histogram("portal_db_query_duration_seconds", "Database query duration", ["operation"])

db_slow_queries_total = Counter("portal_db_slow_queries_total", "Queries slower than the configured threshold")

# Catalog Metrics
catalog_items_total = Gauge("portal_catalog_items_total", "Catalog records", ["content_type"])

import_rows_total = Counter("portal_import_rows_total", "CSV import rows processed", ["content_type", "outcome"])

deals_synced_total = Counter("portal_deals_synced_total", "Free game deals upserted", ["source"])

# API Metrics
api_request_duration_seconds = Histogram(
    "portal_api_request_duration_seconds", "API request duration", ["endpoint", "method"]
)

api_requests_total = Counter("portal_api_requests_total", "Total API requests", ["endpoint", "method", "status_code"])


def init_metrics(app):
    @app.route("/api/metrics")
    def metrics():
        update_db_metrics()
        return Response(generate_latest(), mimetype=CONTENT_TYPE_LATEST)

    @app.before_request
    def before_request():
        request.start_time = time.time()

    @app.after_request
    def after_request(response):
        duration = time.time() - getattr(request, "start_time", time.time())
        api_request_duration_seconds.labels(endpoint=request.endpoint or "unknown", method=request.method).observe(
            duration
        )
        api_requests_total.labels(
            endpoint=request.endpoint or "unknown", method=request.method, status_code=response.status_code
        ).inc()
        return response

    logger.info("Prometheus metrics initialized at /api/metrics")


def update_db_metrics():
    """Refresh pool usage and catalog sizes before an export."""
    from db import db
    from content_types import CONTENT_TYPES

    pool = db.engine.pool
    if hasattr(pool, "checkedout"):
        db_connection_pool_checked_out.set(pool.checkedout())

    for key, content_type in CONTENT_TYPES.items():
        catalog_items_total.labels(content_type=key).set(db.session.query(content_type.model).count())
