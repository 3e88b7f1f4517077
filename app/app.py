"""
Game Portal - catalog, admin panel and free-game deals
Application Factory and Initialization
"""
import os
import sys
import logging

import flask.cli
flask.cli.show_server_banner = lambda *args: None

# Core Flask imports
from flask import Flask
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

# Local imports
from constants import BUILD_VERSION
from settings import load_settings, database_url, engine_options
from db import db, init_db
from auth import auth_blueprint, login_manager
from exceptions import register_exception_handlers
from rest_api import init_rest_api
from metrics import init_metrics
from utils import ColoredFormatter, FilterRemoveDateFromWerkzeugLogs, get_or_create_secret_key, sanitize_sensitive_data
import structlog

# Routes
from routes.admin import admin_bp
from routes.system import system_bp

# Jobs
from jobs.scheduler import JobScheduler

# Global variables
limiter = Limiter(key_func=get_remote_address, storage_uri="memory://")
job_scheduler = None

# Logging configuration
formatter = ColoredFormatter(
    '[%(asctime)s.%(msecs)03d] %(levelname)s (%(module)s) %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S',
)
handler = logging.StreamHandler(sys.stdout)
handler.setFormatter(formatter)

logging.basicConfig(
    level=os.environ.get('LOG_LEVEL', 'INFO').upper(),
    handlers=[handler]
)

structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer() if os.environ.get('LOG_FORMAT') == 'json' else structlog.dev.ConsoleRenderer()
    ],
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    wrapper_class=structlog.stdlib.BoundLogger,
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger('main')

# Apply filter to hide date from http access logs
logging.getLogger('werkzeug').addFilter(FilterRemoveDateFromWerkzeugLogs())


def create_app(test_config=None):
    """Application factory

    `test_config` is applied over the settings-derived config, which lets the
    test suite point the app at an in-memory database.
    """
    global job_scheduler

    app = Flask(__name__)
    app_settings = load_settings()
    logger.debug("Loaded settings", settings=sanitize_sensitive_data(app_settings))

    app.config.from_mapping(
        SQLALCHEMY_DATABASE_URI=database_url(app_settings),
        SQLALCHEMY_TRACK_MODIFICATIONS=False,
        SECURE_COOKIES=app_settings['auth']['secure_cookies'],
        SLOW_QUERY_MS=app_settings['database']['slow_query_ms'],
        ERROR_404_HELP=False,
        RESTX_MASK_SWAGGER=False,
    )
    if test_config:
        app.config.update(test_config)
    if not app.config.get('SECRET_KEY'):
        app.config['SECRET_KEY'] = get_or_create_secret_key()

    # One bounded pool per app, sized for the hosted database's connection cap
    app.config['SQLALCHEMY_ENGINE_OPTIONS'] = engine_options(
        app.config['SQLALCHEMY_DATABASE_URI'], app_settings['database']
    )

    # Initialize components
    db.init_app(app)
    login_manager.init_app(app)
    limiter.init_app(app)

    # Register exception handlers
    register_exception_handlers(app)

    # Register blueprints
    app.register_blueprint(auth_blueprint)
    app.register_blueprint(admin_bp)
    app.register_blueprint(system_bp)

    # Initialize REST API
    init_rest_api(app)

    # Initialize metrics
    init_metrics(app)

    # Initialize database
    init_db(app)

    # Initialize job scheduler
    if not app.testing and job_scheduler is None:
        job_scheduler = JobScheduler()
        job_scheduler.init_app(app, app_settings)

    logger.info(f"Application ready (build {BUILD_VERSION})")
    return app


if __name__ == '__main__':
    app = create_app()
    logger.info(f'Build Version: {BUILD_VERSION}')
    logger.info('Starting server on port 8465...')
    app.run(debug=False, use_reloader=False, host="0.0.0.0", port=int(os.environ.get('PORT', 8465)))
    logger.info('Shutting down server...')
    if job_scheduler:
        job_scheduler.shutdown()
