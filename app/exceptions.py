"""
Portal - Custom Exceptions and Exception Handlers
"""
import structlog
from flask import jsonify
from werkzeug.exceptions import HTTPException

logger = structlog.get_logger('exceptions')


class PortalException(Exception):
    """Base exception for the portal"""
    status_code = 400

    def __init__(self, message: str, code: str = "PORTAL_ERROR", details=None):
        self.message = message
        self.code = code
        self.details = details
        super().__init__(message)

    def to_dict(self):
        payload = {
            'error': self.message,
            'code': self.code,
        }
        if self.details:
            payload['details'] = self.details
        return payload


class ValidationException(PortalException):
    """Validation-related exceptions"""
    status_code = 400

    def __init__(self, message: str, details=None):
        super().__init__(message, code="VALIDATION_ERROR", details=details)
        logger.warning(f"Validation error: {message}")


class AuthenticationException(PortalException):
    """Missing or invalid admin session / CSRF token.

    The message stays generic, the reason only goes to the log.
    """
    status_code = 401

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message, code="UNAUTHORIZED")


class NotFoundException(PortalException):
    """Referenced record does not exist"""
    status_code = 404

    def __init__(self, resource: str, identifier=None):
        message = f"{resource} not found" if identifier is None else f"{resource} '{identifier}' not found"
        super().__init__(message, code="NOT_FOUND")


class DatabaseException(PortalException):
    """Database-related exceptions"""
    status_code = 500

    def __init__(self, message: str = "Database error"):
        super().__init__(message, code="DATABASE_ERROR")
        logger.error(f"Database error: {message}")


class ExternalServiceException(PortalException):
    """Third-party API failures (deal feed, reCAPTCHA)"""
    status_code = 502

    def __init__(self, service: str, message: str = "Upstream service unavailable"):
        self.service = service
        super().__init__(message, code="EXTERNAL_SERVICE_ERROR")
        logger.error(f"{service} error: {message}")


def handle_portal_exception(e):
    return e.to_dict(), e.status_code


def register_exception_handlers(app):
    """Register exception handlers with Flask app"""

    @app.errorhandler(HTTPException)
    def handle_http_exception(e):
        """Handle HTTP exceptions"""
        return jsonify({
            'error': e.description,
            'code': e.name.upper().replace(' ', '_'),
        }), e.code

    @app.errorhandler(PortalException)
    def handle_custom_exception(e):
        """Handle portal exceptions using their own status code"""
        payload, status = handle_portal_exception(e)
        return jsonify(payload), status

    @app.errorhandler(Exception)
    def handle_generic_exception(e):
        """Handle all other exceptions"""
        logger.error(f"Unhandled exception: {e}", exc_info=True)
        return jsonify({
            'error': 'An unexpected error occurred',
            'code': 'INTERNAL_ERROR',
        }), 500


def register_api_error_handlers(api):
    """Same mapping for the flask-restx API, which handles its own errors."""

    @api.errorhandler(PortalException)
    def handle_api_portal_exception(e):
        return handle_portal_exception(e)
