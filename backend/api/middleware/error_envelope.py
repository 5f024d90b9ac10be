"""
Error envelope middleware - Standardize all error responses.

Every non-2xx JSON response has the same shape:
{
    "error": {
        "code": "INVALID_PARAMS",
        "message": "month is required (1-12)",
        "requestId": "uuid",
        "field": "month"            # optional
    }
}
"""

import logging
from flask import Flask, jsonify, g
from werkzeug.exceptions import HTTPException


logger = logging.getLogger('api.middleware.error')


# Error codes reference
ERROR_CODES = {
    # Client errors (4xx)
    "BAD_REQUEST": 400,
    "INVALID_PARAMS": 400,
    "NOT_FOUND": 404,
    "METHOD_NOT_ALLOWED": 405,

    # Upstream errors
    "UPSTREAM_ERROR": 502,
    "UPSTREAM_PAYLOAD_INVALID": 502,

    # Server errors (5xx)
    "INTERNAL_ERROR": 500,
    "SERVICE_UNAVAILABLE": 503,
}


def setup_error_handlers(app: Flask) -> None:
    """
    Set up standardized error handlers on Flask app.

    Handles:
    - HTTP exceptions (404, 405, etc.) - status codes preserved
    - Unhandled Python exceptions - converted to 500 INTERNAL_ERROR
    """

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        """Handle Flask/Werkzeug HTTP exceptions."""
        # "Not Found" -> "NOT_FOUND"
        code = error.name.upper().replace(' ', '_')
        return make_error_response(code, error.description, status_code=error.code)

    @app.errorhandler(Exception)
    def handle_generic_error(error):
        """Handle unhandled Python exceptions."""
        if isinstance(error, HTTPException):
            return handle_http_error(error)

        logger.exception(
            f"Unhandled error: {error}",
            extra={
                "event": "unhandled_error",
                "request_id": getattr(g, 'request_id', None),
                "error_type": type(error).__name__,
            }
        )
        return make_error_response("INTERNAL_ERROR", "An unexpected error occurred")


def make_error_response(
    code: str,
    message: str,
    status_code: int = None,
    field: str = None,
    details: dict = None,
):
    """
    Create a standardized error response.

    Args:
        code: Error code (e.g., "INVALID_PARAMS")
        message: Human-readable error message
        status_code: HTTP status code (defaults based on error code)
        field: Optional field name that caused the error
        details: Optional additional details dict

    Returns:
        Tuple of (response, status_code)
    """
    request_id = getattr(g, 'request_id', None)

    if status_code is None:
        status_code = ERROR_CODES.get(code, 500)

    error = {
        "error": {
            "code": code,
            "message": message,
            "requestId": request_id,
        }
    }

    if field:
        error["error"]["field"] = field
    if details:
        error["error"]["details"] = details

    response = jsonify(error)
    if request_id:
        response.headers['X-Request-ID'] = request_id

    return response, status_code


def validation_error_response(error):
    """
    Convert utils.normalize.ValidationError to a 400 INVALID_PARAMS response.

    Usage:
        try:
            period = resolve_month_period(request.args.get("month"))
        except ValidationError as e:
            return validation_error_response(e)
    """
    details = None
    if error.received_value is not None:
        details = {"receivedValue": str(error.received_value)}
    return make_error_response(
        "INVALID_PARAMS",
        str(error),
        field=error.field,
        details=details,
    )
