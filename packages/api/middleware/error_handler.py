"""Error handling middleware for consistent API error responses."""

import logging
from typing import Any

from werkzeug.exceptions import HTTPException

from packages.api import ERROR_STATUS_CODES, ErrorResponse
from packages.tco_engine.validation import ValidationError

logger = logging.getLogger("storage_tco.api.middleware.error_handler")


def handle_http_error(error: HTTPException) -> tuple[dict[str, Any], int]:
    """
    Handle HTTP exceptions with consistent error response format.

    Args:
        error: HTTP exception from Flask/Werkzeug

    Returns:
        Tuple of (error response dict, status code)
    """
    status_to_error_code = {
        400: "VALIDATION_ERROR",
        404: "NOT_FOUND",
        405: "METHOD_NOT_ALLOWED",
        409: "CONFLICT",
        415: "UNSUPPORTED_MEDIA_TYPE",
    }

    error_code = status_to_error_code.get(error.code, "INTERNAL_ERROR")
    status_code = error.code or 500

    error_response = ErrorResponse(
        error_code=error_code,
        message=error.description or "An error occurred",
        details={"http_status": status_code},
    )

    logger.warning(
        f"HTTP error {status_code}: {error_code} - {error.description}",
        extra={"error_code": error_code, "status_code": status_code},
    )

    return _serialize_error_response(error_response), status_code


def handle_validation_error(error: ValidationError) -> tuple[dict[str, Any], int]:
    """
    Handle range validation failures, returning every failing field.

    Args:
        error: ValidationError raised by validate_configuration

    Returns:
        Tuple of (error response dict, status code)
    """
    error_response = ErrorResponse(
        error_code="VALIDATION_ERROR",
        message="Configuration validation failed",
        details={"errors": error.errors},
    )

    logger.info(f"Validation failed for fields: {sorted(error.errors)}")

    return _serialize_error_response(error_response), ERROR_STATUS_CODES["VALIDATION_ERROR"]


def handle_generic_error(error: Exception) -> tuple[dict[str, Any], int]:
    """
    Handle generic exceptions with consistent error response format.

    Args:
        error: Generic Python exception

    Returns:
        Tuple of (error response dict, status code)
    """
    error_code = _determine_error_code(error)
    status_code = ERROR_STATUS_CODES.get(error_code, 500)

    # KeyError wraps its message in quotes
    message = error.args[0] if isinstance(error, KeyError) and error.args else str(error)

    error_response = ErrorResponse(
        error_code=error_code,
        message=str(message),
        details={"exception_type": type(error).__name__},
    )

    if status_code >= 500:
        logger.error(
            f"Unhandled exception: {type(error).__name__} - {error}",
            extra={"error_code": error_code, "exception_type": type(error).__name__},
            exc_info=True,
        )
    else:
        logger.warning(
            f"Request failed: {type(error).__name__} - {message}",
            extra={"error_code": error_code, "exception_type": type(error).__name__},
        )

    return _serialize_error_response(error_response), status_code


def _determine_error_code(error: Exception) -> str:
    """
    Determine appropriate error code based on exception type.

    Args:
        error: Exception instance

    Returns:
        Error code string
    """
    if isinstance(error, (ValueError, TypeError)):
        return "VALIDATION_ERROR"
    if isinstance(error, KeyError):
        return "NOT_FOUND"
    return "INTERNAL_ERROR"


def _serialize_error_response(error_response: ErrorResponse) -> dict[str, Any]:
    """
    Serialize ErrorResponse dataclass to JSON-compatible dict.

    Args:
        error_response: ErrorResponse instance

    Returns:
        Dictionary representation of error response
    """
    return {
        "error_code": error_response.error_code,
        "message": error_response.message,
        "details": error_response.details,
        "timestamp": error_response.timestamp.isoformat(),
    }


def create_error_response(
    error_code: str, message: str, details: dict[str, Any] | None = None
) -> tuple[dict[str, Any], int]:
    """
    Create a standardized error response.

    Route handlers use this for errors they detect themselves.

    Args:
        error_code: Machine-readable error code (must be in ERROR_STATUS_CODES)
        message: Human-readable error message
        details: Optional additional context

    Returns:
        Tuple of (error response dict, status code)
    """
    if error_code not in ERROR_STATUS_CODES:
        logger.warning(f"Unknown error code: {error_code}, using INTERNAL_ERROR")
        error_code = "INTERNAL_ERROR"

    status_code = ERROR_STATUS_CODES[error_code]

    error_response = ErrorResponse(error_code=error_code, message=message, details=details)

    return _serialize_error_response(error_response), status_code
