"""
Authentication Middleware - admin request guard

Every admin request needs the auth cookie. Mutating requests also need the
double-submit CSRF token: the X-CSRF-Token header must equal the csrf_token
cookie set at login.
"""
from functools import wraps
from flask import request
from flask_login import current_user
import hmac
import logging

from constants import AUTH_COOKIE, AUTH_COOKIE_VALUE, CSRF_COOKIE, CSRF_HEADER, MUTATING_METHODS
from exceptions import AuthenticationException

logger = logging.getLogger('main')


def has_auth_cookie(req):
    return req.cookies.get(AUTH_COOKIE) == AUTH_COOKIE_VALUE


def csrf_token_valid(req):
    header_token = req.headers.get(CSRF_HEADER)
    cookie_token = req.cookies.get(CSRF_COOKIE)
    if not header_token or not cookie_token:
        return False
    return hmac.compare_digest(header_token, cookie_token)


def rejection_reason(req):
    """Why `req` may not reach an admin endpoint, or None when it may."""
    if not has_auth_cookie(req):
        return 'missing or invalid auth cookie'
    if req.method in MUTATING_METHODS and not csrf_token_valid(req):
        return 'CSRF token mismatch'
    return None


def is_authorized(req):
    return rejection_reason(req) is None


def admin_required(f):
    """Decorator for admin endpoints, rejects with a bare 401."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        reason = None if current_user.is_authenticated else 'missing or invalid auth cookie'
        reason = reason or rejection_reason(request)
        if reason:
            logger.warning(f"Rejected {request.method} {request.path} from {request.remote_addr}: {reason}")
            raise AuthenticationException()
        return f(*args, **kwargs)
    return decorated_function
