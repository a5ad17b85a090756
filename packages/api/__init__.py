"""API package for the storage TCO calculator REST endpoints."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

__all__ = ["ErrorResponse", "ERROR_STATUS_CODES"]


@dataclass
class ErrorResponse:
    """Consistent error response format for all API endpoints."""

    error_code: str  # Machine-readable error code
    message: str  # Human-readable error message
    details: Optional[dict[str, Any]] = None  # Additional context
    timestamp: datetime = field(default_factory=datetime.utcnow)


# HTTP Status Code Mapping
ERROR_STATUS_CODES = {
    "VALIDATION_ERROR": 400,
    "NOT_FOUND": 404,
    "METHOD_NOT_ALLOWED": 405,
    "CONFLICT": 409,
    "UNSUPPORTED_MEDIA_TYPE": 415,
    "INTERNAL_ERROR": 500,
}
