"""
Uniform response envelope:
  success: {status, success: true,  message, data}
  error:   {status, success: false, message, errors?}
"""
from flask import jsonify, current_app
from werkzeug.exceptions import HTTPException
from marshmallow import ValidationError
from sqlalchemy.exc import IntegrityError
import logging

from utils.auth_errors import AuthError, AuthErrorKind


def success_response(data=None, message: str = "Success", status: int = 200):
    payload = {"status": status, "success": True, "message": message, "data": data}
    return jsonify(payload), status


def error_response(message: str, status: int, errors=None):
    payload = {"status": status, "success": False, "message": message}
    if errors:
        payload["errors"] = errors
    return jsonify(payload), status


def register_error_handlers(app):
    @app.errorhandler(AuthError)
    def handle_auth_error(err: AuthError):
        if err.kind is AuthErrorKind.STORE_UNAVAILABLE:
            # Cause already logged by the credential store; never echo it
            return error_response("Internal server error", 500)
        return error_response(err.message, err.status, errors={"code": err.kind.name})

    # Marshmallow validation errors map to 422
    @app.errorhandler(ValidationError)
    def handle_validation_error(err: ValidationError):
        # err.messages contains field-level details
        return error_response("Validation Error", 422, errors=err.messages)

    # Integrity errors (unique constraints, FK violations, check constraints)
    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err: IntegrityError):
        message = str(getattr(err, "orig", err))
        lower_msg = message.lower()
        logging.warning("Integrity error: %s", message)
        if "unique constraint" in lower_msg or "unique violation" in lower_msg:
            return error_response("Unique constraint violated.", 409)
        if "foreign key constraint" in lower_msg or "foreign key mismatch" in lower_msg:
            return error_response("Foreign key constraint failed.", 400)
        return error_response("Integrity error.", 400)

    # Werkzeug HTTPExceptions (abort(), 404 routing, 405, 429 from the limiter)
    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        return error_response(err.description or err.name, err.code or 400)

    # 500 Internal Error (catch-all)
    @app.errorhandler(Exception)
    def internal_error(err: Exception):
        logging.exception("Unhandled exception", exc_info=err)
        errors = None
        # In dev, include exception details to speed up debugging
        if current_app and current_app.debug:
            errors = {"type": err.__class__.__name__, "message": str(err)}
        return error_response("An unexpected error occurred", 500, errors=errors)
