"""
Error schemas - Pydantic models for error responses

Every error the API returns uses one of these shapes, so clients (the web UI
and the microcontroller) can rely on error.code without parsing messages.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, Dict, Any
from datetime import datetime, timezone


class ErrorDetail(BaseModel):
    """Detailed error information"""
    code: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error message")
    details: Optional[Dict[str, Any]] = Field(
        None,
        description="Additional context (frame index, current mode, etc.)"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the error occurred"
    )


class ErrorResponse(BaseModel):
    """API error response - standardized format"""
    error: ErrorDetail = Field(description="Error information")
    request_id: Optional[str] = Field(None, description="Request ID for logging/debugging")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error": {
                    "code": "WRONG_MODE",
                    "message": "LED state is not in a buffered mode (current mode: simple)",
                    "details": {"current_mode": "simple"},
                    "timestamp": "2025-11-26T10:30:00Z"
                },
                "request_id": "req-12345"
            }
        }
    )


class ValidationErrorResponse(BaseModel):
    """Validation error - when request body is invalid"""
    error: ErrorDetail = Field(description="Error information")
    validation_errors: list[Dict[str, Any]] = Field(
        description="Per-field validation errors"
    )
    request_id: Optional[str] = Field(None, description="Request ID for logging/debugging")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error": {
                    "code": "VALIDATION_ERROR",
                    "message": "Request validation failed",
                    "details": {"error_count": 1},
                    "timestamp": "2025-11-26T10:30:00Z"
                },
                "validation_errors": [
                    {
                        "field": "color",
                        "message": "String should match pattern '^#[0-9A-Fa-f]{6}$'",
                        "type": "string_pattern_mismatch"
                    }
                ],
                "request_id": "req-12345"
            }
        }
    )
