from flask import current_app, jsonify
from marshmallow import ValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from werkzeug.exceptions import HTTPException
import logging

from utils.security import SigningError
from utils.tokens import PersistenceError

logger = logging.getLogger(__name__)

VALIDATION_ERROR = "VALIDATION_ERROR"
AUTHENTICATION_ERROR = "AUTHENTICATION_ERROR"
AUTHORIZATION_ERROR = "AUTHORIZATION_ERROR"
NOT_FOUND = "NOT_FOUND"
CONFLICT = "CONFLICT"
INTERNAL_ERROR = "INTERNAL_ERROR"
BAD_REQUEST = "BAD_REQUEST"
TOO_MANY_REQUESTS = "TOO_MANY_REQUESTS"

# Status code -> (error type, fallback message)
HTTP_ERROR_TYPES = {
    400: (BAD_REQUEST, "Bad request"),
    401: (AUTHENTICATION_ERROR, "Unauthorized"),
    403: (AUTHORIZATION_ERROR, "Forbidden"),
    404: (NOT_FOUND, "Resource not found"),
    409: (CONFLICT, "Conflict"),
    422: (VALIDATION_ERROR, "Validation error"),
    429: (TOO_MANY_REQUESTS, "Too many requests"),
}


class RequestValidationError(Exception):
    """A request body or query string failed its schema."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details


def error_response(error_type: str, message: str, status: int, details=None):
    body = {"type": error_type, "message": message}
    if details is not None:
        body["details"] = details
    return jsonify({"error": body}), status


def _internal_details(err: Exception):
    if current_app and current_app.config.get("EXPOSE_ERROR_DETAILS"):
        return {"type": err.__class__.__name__, "message": str(err)}
    return None


def register_error_handlers(app):
    @app.errorhandler(RequestValidationError)
    def handle_request_validation(err: RequestValidationError):
        return error_response(VALIDATION_ERROR, err.message, 400, details=err.details)

    # Schemas loaded outside load_json() still get field-level details
    @app.errorhandler(ValidationError)
    def handle_validation_error(err: ValidationError):
        return error_response(VALIDATION_ERROR, "Invalid input", 400, details=err.messages)

    # Unique constraint races that slipped past the explicit existence checks
    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err: IntegrityError):
        logger.warning("Integrity error: %s", getattr(err, "orig", err))
        return error_response(CONFLICT, "Resource already exists or violates a constraint", 409,
                              details=_internal_details(err))

    @app.errorhandler(PersistenceError)
    @app.errorhandler(SQLAlchemyError)
    def handle_persistence_error(err: Exception):
        logger.exception("Database error", exc_info=err)
        return error_response(INTERNAL_ERROR, "Internal server error", 500, details=_internal_details(err))

    @app.errorhandler(SigningError)
    def handle_signing_error(err: SigningError):
        logger.exception("Token signing failed", exc_info=err)
        return error_response(INTERNAL_ERROR, "Internal server error", 500, details=_internal_details(err))

    # Werkzeug HTTPExceptions (abort(...)) map to their status codes
    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        status = err.code or 400
        if status >= 500:
            return error_response(INTERNAL_ERROR, "Internal server error", status)
        error_type, fallback = HTTP_ERROR_TYPES.get(status, (BAD_REQUEST, "Bad request"))
        # werkzeug's stock descriptions are replaced by our short messages
        message = err.description
        if not message or message == type(err).description:
            message = fallback
        return error_response(error_type, message, status)

    # 500 Internal Error (catch-all)
    @app.errorhandler(Exception)
    def internal_error(err: Exception):
        logger.exception("Unhandled exception", exc_info=err)
        return error_response(INTERNAL_ERROR, "Internal server error", 500, details=_internal_details(err))
