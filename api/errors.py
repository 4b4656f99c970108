from flask import jsonify, current_app
from werkzeug.exceptions import HTTPException
from marshmallow import ValidationError
from sqlalchemy.exc import IntegrityError
import logging

from utils.exceptions import (
    AppError,
    DuplicateException,
    IllegalArgumentException,
    NotFoundException,
    UnAuthorizedException,
)

# The one place an application error kind becomes an HTTP status
ERROR_STATUS = (
    (NotFoundException, 404),
    (DuplicateException, 409),
    (UnAuthorizedException, 401),
    (IllegalArgumentException, 400),
)


def status_for(err: AppError) -> int:
    for kind, status in ERROR_STATUS:
        if isinstance(err, kind):
            return status
    return 500


def error_response(error: str, message: str, status: int, details: dict | None = None):
    payload = {"error": error, "message": message, "status": status}
    if details:
        payload["details"] = details
    return jsonify(payload), status


def register_error_handlers(app):
    # 404 Not Found
    @app.errorhandler(404)
    def not_found(e):
        return error_response("NOT_FOUND", "Resource not found", 404)

    # Application errors raised by services and the auth gate
    @app.errorhandler(AppError)
    def handle_app_error(err: AppError):
        status = status_for(err)
        response, status = error_response(err.code, err.message, status)
        if status == 401:
            response.headers["WWW-Authenticate"] = "Bearer"
        return response, status

    # Marshmallow validation errors map to 422
    @app.errorhandler(ValidationError)
    def handle_validation_error(err: ValidationError):
        return error_response("VALIDATION_ERROR", "Invalid input", 422, details=err.messages)

    # Unique constraints that slipped past the duplicate checks (concurrent signups)
    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err: IntegrityError):
        message = str(getattr(err, "orig", err))
        lower_msg = message.lower()
        if current_app and current_app.debug:
            logging.exception("Integrity error", exc_info=err)
        if "unique" in lower_msg:
            return error_response("CONFLICT", "Unique constraint violated.", 409)
        return error_response("BAD_REQUEST", "Integrity error.", 400)

    # Werkzeug HTTPExceptions map to their status codes
    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        return error_response("BAD_REQUEST", err.description, err.code or 400)

    # 500 Internal Error (catch-all)
    @app.errorhandler(Exception)
    def internal_error(err: Exception):
        details = None
        logging.exception("Unhandled exception", exc_info=err)
        if current_app and current_app.debug:
            details = {"type": err.__class__.__name__, "message": str(err)}
        return error_response("INTERNAL_ERROR", "An unexpected error occurred", 500, details=details)
