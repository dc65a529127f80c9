"""
Error schemas - Pydantic models for error responses
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ErrorDetail(BaseModel):
    """Detailed error information"""
    code: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error message")
    details: Optional[Dict[str, Any]] = Field(
        None,
        description="Additional context (parameter names, offending values, etc.)"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the error occurred"
    )


class ErrorResponse(BaseModel):
    """API error response - standardized format

    All API errors use this structure, so scripts and the web UI can handle
    them the same way.
    """
    error: ErrorDetail = Field(description="Error information")
    request_id: Optional[str] = Field(None, description="Request ID for logging/debugging")

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "error": {
                "code": "ENDPOINT_NOT_FOUND",
                "message": "Unknown endpoint id '00:00:00:00:00:00'",
                "details": {"endpoint_id": "00:00:00:00:00:00"},
                "timestamp": "2025-11-26T10:30:00Z"
            },
            "request_id": "req-12345"
        }
    })
