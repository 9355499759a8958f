"""
Error handling middleware for API

FastAPI lets us define custom handlers for specific exception types.
When an exception is raised anywhere in the request, FastAPI catches it
and calls the appropriate handler to return a formatted error response.

Handlers:
- Request validation errors and malformed JSON (400)
- Domain errors from models.errors (status code carried by the error)
- Unexpected errors (500)
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from datetime import datetime, timezone
import uuid

from api.schemas.error import ErrorResponse, ErrorDetail, ValidationErrorResponse
from models.errors import DomainError
from utils.logger import get_logger
from models.enums import LogCategory
import json

log = get_logger().for_category(LogCategory.API)


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with FastAPI app"""

    # Handle validation errors (bad request format, malformed JSON)
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle Pydantic validation errors (bad JSON structure)"""
        request_id = str(uuid.uuid4())
        errors = exc.errors()

        log.warn(f"Validation error ({request_id}): {len(errors)} errors", path=request.url.path)

        # Convert Pydantic errors to readable format
        validation_errors = []
        for error in errors:
            loc = error.get("loc", ())
            field = ".".join(str(x) for x in loc[1:]) if len(loc) > 1 else ".".join(str(x) for x in loc)
            validation_errors.append({
                "field": field,
                "message": error.get("msg", ""),
                "type": error.get("type", "")
            })

        malformed = any(e["type"] == "json_invalid" for e in validation_errors)
        response = ValidationErrorResponse(
            error=ErrorDetail(
                code="INVALID_JSON" if malformed else "VALIDATION_ERROR",
                message="Invalid JSON body" if malformed else "Request validation failed",
                details={"error_count": len(errors)},
                timestamp=datetime.now(timezone.utc)
            ),
            validation_errors=validation_errors,
            request_id=request_id
        )

        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=json.loads(response.model_dump_json())
        )

    # Handle domain-specific errors (our custom exceptions)
    @app.exception_handler(DomainError)
    async def domain_exception_handler(request: Request, exc: DomainError):
        """Handle domain-specific business logic errors"""
        request_id = str(uuid.uuid4())

        if exc.status_code >= 500:
            log.error(f"Domain error ({request_id}): {exc.code} - {exc.message}", path=request.url.path)
        else:
            log.warn(f"Domain error ({request_id}): {exc.code} - {exc.message}", path=request.url.path)

        response = ErrorResponse(
            error=ErrorDetail(
                code=exc.code,
                message=exc.message,
                details=exc.details,
                timestamp=datetime.now(timezone.utc)
            ),
            request_id=request_id
        )

        return JSONResponse(
            status_code=exc.status_code,
            content=json.loads(response.model_dump_json())
        )

    # Handle unexpected errors (server errors)
    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle unexpected errors"""
        request_id = str(uuid.uuid4())

        log.error(
            f"Unexpected error ({request_id}): {type(exc).__name__}: {str(exc)}",
            path=request.url.path,
            exception_type=type(exc).__name__
        )

        response = ErrorResponse(
            error=ErrorDetail(
                code="INTERNAL_SERVER_ERROR",
                message="An unexpected error occurred. Please try again.",
                details={"request_id": request_id},
                timestamp=datetime.now(timezone.utc)
            ),
            request_id=request_id
        )

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=json.loads(response.model_dump_json())
        )
