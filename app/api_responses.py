"""
API Response Utilities - shared response shapes for the JSON endpoints
"""

from flask import jsonify
from functools import wraps
from sqlalchemy.exc import SQLAlchemyError
import logging
import math

logger = logging.getLogger("main")


class ErrorCode:
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"


def success_response(data=None, status_code=200):
    """JSON body as-is, or {"success": true} when there is nothing to return."""
    if data is None:
        data = {"success": True}
    return jsonify(data), status_code


def error_response(error_code=ErrorCode.INTERNAL_ERROR, message=None, status_code=400):
    if not message:
        message = {
            ErrorCode.NOT_FOUND: "Resource not found",
            ErrorCode.VALIDATION_ERROR: "Invalid request parameters",
            ErrorCode.UNAUTHORIZED: "Unauthorized",
        }.get(error_code, "An unexpected error occurred")
    return jsonify({"error": message, "code": error_code}), status_code


def pagination_meta(total, page, per_page):
    return {
        "totalItems": total,
        "totalPages": math.ceil(total / per_page) if per_page else 0,
        "currentPage": page,
        "itemsPerPage": per_page,
    }


def paginated_response(items, total, page, per_page):
    """
    Standard paginated response format for admin list endpoints
    """
    return jsonify({"items": items, "pagination": pagination_meta(total, page, per_page)}), 200


def handle_api_errors(f):
    """
    Turn stray ValueErrors into 400s and database failures into a generic 500.
    Portal exceptions pass through to the app-level handlers.
    """

    @wraps(f)
    def wrapper(*args, **kwargs):
        from db import db

        try:
            return f(*args, **kwargs)
        except ValueError as e:
            return error_response(ErrorCode.VALIDATION_ERROR, message=str(e), status_code=400)
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Database error in {f.__name__}: {e}", exc_info=True)
            return error_response(ErrorCode.INTERNAL_ERROR, status_code=500)

    return wrapper
