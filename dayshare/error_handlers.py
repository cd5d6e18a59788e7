"""Application-wide error handlers that answer with JSON."""

from flask import Blueprint, current_app, jsonify
from flask_wtf.csrf import CSRFError

from .errors import AppError

error_handlers_bp = Blueprint("error_handlers", __name__)


def _error_response(kind, message, status_code):
    return jsonify({"error": kind, "message": message}), status_code


@error_handlers_bp.app_errorhandler(AppError)
def handle_app_error(error):
    """Handles application errors raised by the service layer."""
    if error.status_code >= 500:
        current_app.logger.error(f"Application Error: {error.message}")
    else:
        current_app.logger.warning(f"{type(error).__name__}: {error.message}")
    return _error_response(error.kind, error.message, error.status_code)


@error_handlers_bp.app_errorhandler(404)
def handle_404(e):
    """Handles generic 404 errors for routes that don't exist."""
    return _error_response("not_found", "Page Not Found", 404)


@error_handlers_bp.app_errorhandler(405)
def handle_405(e):
    """Handles requests made with an unsupported HTTP method."""
    return _error_response("method_not_allowed", "Method Not Allowed", 405)


@error_handlers_bp.app_errorhandler(500)
def handle_500(e):
    """Handles unexpected server errors."""
    current_app.logger.error(f"Internal Server Error: {e}")
    return _error_response(
        "internal_error", "An unexpected error occurred. Please try again later.", 500
    )


@error_handlers_bp.app_errorhandler(CSRFError)
def handle_csrf_error(e):
    """
    Handles CSRF errors, which usually indicate a session timeout or a missing token.
    """
    current_app.logger.warning(f"CSRF Error: {e.description}")
    return _error_response("csrf_error", e.description, 400)
