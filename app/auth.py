from flask import Blueprint, request, current_app
from flask_login import LoginManager, UserMixin, current_user
from werkzeug.security import check_password_hash
import secrets
import logging

from constants import AUTH_COOKIE, AUTH_COOKIE_VALUE, CSRF_COOKIE
from api_responses import success_response, error_response, handle_api_errors, ErrorCode
from middleware.auth import has_auth_cookie
from settings import load_settings

# Retrieve main logger
logger = logging.getLogger("main")


class AdminUser(UserMixin):
    """The single site administrator, identified by the auth cookie."""
    id = "admin"

    def get_id(self):
        return self.id


auth_blueprint = Blueprint("auth", __name__, url_prefix="/api/auth")

login_manager = LoginManager()


@login_manager.user_loader
def load_user(user_id):
    return None


@login_manager.request_loader
def load_user_from_request(req):
    if has_auth_cookie(req):
        return AdminUser()
    return None


def check_admin_password(password):
    password_hash = load_settings()["auth"].get("admin_password_hash")
    if not password_hash:
        logger.error("No admin password configured, login is disabled")
        return False
    return check_password_hash(password_hash, password)


def _cookie_options():
    return {
        "secure": current_app.config.get("SECURE_COOKIES", True),
        "samesite": "Strict",
        "path": "/",
    }


def set_auth_cookies(response):
    """Mark the browser as logged in and hand it a fresh CSRF token."""
    max_age = load_settings()["auth"]["cookie_max_age"]
    options = _cookie_options()
    response.set_cookie(AUTH_COOKIE, AUTH_COOKIE_VALUE, max_age=max_age, httponly=True, **options)
    # Readable by scripts, the admin UI echoes it in the X-CSRF-Token header
    response.set_cookie(CSRF_COOKIE, secrets.token_hex(32), max_age=max_age, httponly=False, **options)
    return response


def clear_auth_cookies(response):
    options = _cookie_options()
    response.set_cookie(AUTH_COOKIE, "", max_age=0, expires=0, httponly=True, **options)
    response.set_cookie(CSRF_COOKIE, "", max_age=0, expires=0, httponly=False, **options)
    return response


@auth_blueprint.route("/login", methods=["POST"])
@handle_api_errors
def login():
    # Import here to avoid circular dependency
    from app import limiter

    @limiter.limit("20 per minute")
    def _rate_limited_login():
        data = request.get_json(silent=True) or {}
        password = data.get("password")

        if not password or not check_admin_password(password):
            logger.warning(f"Incorrect admin login from {request.remote_addr}")
            return error_response(ErrorCode.UNAUTHORIZED, message="Invalid password", status_code=401)

        logger.info(f"Successful admin login from {request.remote_addr}")
        response, status = success_response()
        return set_auth_cookies(response), status

    return _rate_limited_login()


@auth_blueprint.route("/check")
def check():
    return success_response({"authenticated": current_user.is_authenticated})


@auth_blueprint.route("/logout")
def logout():
    response, status = success_response()
    return clear_auth_cookies(response), status
