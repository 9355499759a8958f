"""
Domain errors

Every error the services raise carries a machine-readable code, a human
message, optional details and the HTTP status the API layer should answer
with. api/middleware/error_handler.py turns them into ErrorResponse JSON.
"""

from typing import Optional


class DomainError(Exception):
    """Base class for domain-specific errors"""
    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[dict] = None,
        status_code: int = 400
    ):
        self.code = code
        self.message = message
        self.details = details or {}
        self.status_code = status_code
        super().__init__(message)


class ValidationError(DomainError):
    """Bad input (field types, ranges, frame format). Never retried."""
    def __init__(self, message: str, details: Optional[dict] = None, code: str = "VALIDATION_ERROR"):
        super().__init__(code=code, message=message, details=details, status_code=400)


# ---------------------------------------------------------------------------
# Frame format errors
# ---------------------------------------------------------------------------

class FrameValidationError(ValidationError):
    """Animation text does not follow the 60-color-per-line format"""


class EmptyInputError(FrameValidationError):
    def __init__(self):
        super().__init__(
            "No frames provided. Expected one line of comma-separated #RRGGBB colors per frame.",
            code="EMPTY_INPUT"
        )


class WrongColorCountError(FrameValidationError):
    def __init__(self, frame_index: int, expected: int, actual: int):
        self.frame_index = frame_index
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Frame {frame_index}: Expected {expected} colors, got {actual}",
            details={"frame_index": frame_index, "expected": expected, "actual": actual},
            code="WRONG_COLOR_COUNT"
        )


class InvalidColorFormatError(FrameValidationError):
    def __init__(self, token: str, frame_index: Optional[int] = None, color_index: Optional[int] = None):
        self.frame_index = frame_index
        self.color_index = color_index
        self.token = token
        if frame_index is None:
            message = f'Invalid hex color format: "{token}" (expected format: #RRGGBB)'
        else:
            message = (
                f'Frame {frame_index}, Color {color_index}: Invalid hex color format: "{token}" '
                f"(expected format: #RRGGBB)"
            )
        super().__init__(
            message,
            details={"frame_index": frame_index, "color_index": color_index, "value": token},
            code="INVALID_COLOR_FORMAT"
        )


# ---------------------------------------------------------------------------
# Mode / playback errors
# ---------------------------------------------------------------------------

class StateMismatchError(DomainError):
    """Operation is not valid for the current mode"""
    def __init__(self, current_mode: str, message: Optional[str] = None):
        self.current_mode = current_mode
        super().__init__(
            code="WRONG_MODE",
            message=message or f"LED state is not in a buffered mode (current mode: {current_mode})",
            details={"current_mode": current_mode},
            status_code=400
        )


class NoBuffersError(DomainError):
    """Buffered mode is active but has nothing to play"""
    def __init__(self, current_mode: str):
        super().__init__(
            code="NO_BUFFERS",
            message="No buffers available. Upload or activate an animation first.",
            details={"current_mode": current_mode, "total_buffers": 0},
            status_code=400
        )


# ---------------------------------------------------------------------------
# Lookup / infrastructure errors
# ---------------------------------------------------------------------------

class NotFoundError(DomainError):
    def __init__(self, kind: str, identifier):
        super().__init__(
            code=f"{kind.upper()}_NOT_FOUND",
            message=f"{kind.capitalize()} '{identifier}' not found",
            details={f"{kind.lower()}_id": identifier},
            status_code=404
        )


class ScriptNotFoundError(NotFoundError):
    def __init__(self, script_id: int):
        super().__init__("script", script_id)


class ExternalServiceError(DomainError):
    """Model or sandbox unavailable, or the submitted code failed"""
    def __init__(self, service: str, message: str, details: Optional[dict] = None):
        self.service = service
        super().__init__(
            code="EXTERNAL_SERVICE_ERROR",
            message=message,
            details={"service": service, **(details or {})},
            status_code=502
        )


class ConfigurationError(DomainError):
    def __init__(self, message: str):
        super().__init__(code="CONFIGURATION_ERROR", message=message, status_code=500)


class UnauthorizedError(DomainError):
    def __init__(self, message: str = "Unauthorized"):
        super().__init__(code="UNAUTHORIZED", message=message, status_code=401)


class StorageError(DomainError):
    """Persisted state could not be read or written"""
    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(
            code="STORAGE_ERROR",
            message=message,
            details={"path": path} if path else None,
            status_code=500
        )
