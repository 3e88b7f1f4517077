"""
System Routes - health checks for load balancers and monitoring
"""

from flask import Blueprint, jsonify
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
import logging
import socket

from constants import BUILD_VERSION
from db import db
from utils import now_utc

logger = logging.getLogger("main")

system_bp = Blueprint("system", __name__, url_prefix="/api")


@system_bp.route("/health", methods=["GET"])
def health_check_api():
    """Liveness: the process is up and serving requests."""
    return jsonify({
        "status": "healthy",
        "version": BUILD_VERSION,
        "hostname": socket.gethostname(),
        "timestamp": now_utc().isoformat(),
    })


@system_bp.route("/health/ready", methods=["GET"])
def readiness_check_api():
    """Readiness: the database answers through the pool."""
    checks = {"timestamp": now_utc().isoformat(), "version": BUILD_VERSION}
    try:
        db.session.execute(text("SELECT 1"))
        checks["database"] = "ok"
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Readiness check failed: {e}")
        checks["database"] = "unavailable"
        return jsonify(dict(checks, status="unhealthy")), 503

    pool = db.engine.pool
    if hasattr(pool, "checkedout"):
        checks["pool"] = {"checked_out": pool.checkedout(), "size": pool.size()}
    return jsonify(dict(checks, status="healthy"))
