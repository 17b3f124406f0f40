# ============================================================================
# HTTP RESPONSE HELPERS
# ============================================================================
# EPOCH: 1 - AUTHOR PLATFORM
# STATUS: Function app - Shared HTTP helpers for blueprints
# PURPOSE: JSON responses, ErrorResponse bodies and exception mapping
# CREATED: 16 OCT 2026
# ============================================================================
"""
HTTP Helpers

Every blueprint builds its responses through these helpers so error bodies
have one shape:

    {"statusCode": 404, "error": "...", "details": "...", "code": "...",
     "traceId": "<uuid4>", "timestamp": "..."}

exception_response() maps ServiceError subclasses to their status code,
pydantic validation failures to 400 and anything else to 500.
"""

import json
import logging
from typing import Any, Dict, Optional

import azure.functions as func
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from core.errors import ServiceError, ValidationError
from function.models.responses import ErrorResponse

logger = logging.getLogger(__name__)

UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred"


def json_response(
    data: Any,
    status_code: int = 200,
    headers: Optional[Dict[str, str]] = None,
) -> func.HttpResponse:
    """Create JSON HTTP response. Pydantic models are dumped camelCase."""
    if isinstance(data, BaseModel):
        data = data.model_dump(by_alias=True, mode="json")
    return func.HttpResponse(
        json.dumps(data, default=str),
        status_code=status_code,
        headers={"Content-Type": "application/json", **(headers or {})},
    )


def error_response(
    message: str,
    status_code: int,
    details: Optional[str] = None,
    code: Optional[str] = None,
) -> func.HttpResponse:
    """Create an ErrorResponse body with the given status."""
    error = ErrorResponse(status_code=status_code, error=message, details=details, code=code)
    return json_response(error.to_body(exclude_none=True), status_code)


def _pydantic_details(exc: PydanticValidationError) -> str:
    parts = []
    for err in exc.errors():
        location = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{location}: {err.get('msg')}" if location else err.get("msg", ""))
    return "; ".join(parts)


def exception_response(exc: Exception, context: str = "request") -> func.HttpResponse:
    """
    Map an exception to an error response.

    Args:
        exc: The exception raised while handling the request
        context: Short description used in the log line
    """
    if isinstance(exc, ServiceError):
        if exc.status_code >= 500:
            logger.error(f"{context} failed: {exc.message} ({exc.details})")
        else:
            logger.warning(f"{context} rejected ({exc.status_code}): {exc.message}")
        return error_response(exc.message, exc.status_code, exc.details, exc.code)

    if isinstance(exc, PydanticValidationError):
        logger.warning(f"{context} rejected (400): invalid request body")
        return error_response("Invalid request body", 400, _pydantic_details(exc), "VALIDATION_ERROR")

    logger.exception(f"Unexpected error during {context}: {exc}")
    return error_response(UNEXPECTED_ERROR_MESSAGE, 500, code="INTERNAL_ERROR")


def read_json(req: func.HttpRequest) -> Dict[str, Any]:
    """
    Parse the request body as a JSON object.

    Raises:
        core.errors.ValidationError: body missing, not JSON, or not an object
    """
    try:
        body = req.get_json()
    except ValueError:
        raise ValidationError("Invalid JSON in request body")
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body


def client_ip(req: func.HttpRequest) -> str:
    """Caller IP: first X-Forwarded-For entry, else X-Real-IP, else 'unknown'."""
    forwarded = req.headers.get("X-Forwarded-For")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    real_ip = req.headers.get("X-Real-IP")
    if real_ip and real_ip.strip():
        return real_ip.strip()
    return "unknown"


__all__ = [
    "UNEXPECTED_ERROR_MESSAGE",
    "json_response",
    "error_response",
    "exception_response",
    "read_json",
    "client_ip",
]
