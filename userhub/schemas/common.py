"""
Common schema types used across the API.
"""

from typing import Any, Dict, List

from pydantic import BaseModel

DEFAULT_VALIDATION_MESSAGE = "Dados inválidos"


class MessageResponse(BaseModel):
    """Standard message response, used for both success and error bodies."""

    message: str


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    version: str


def first_error_message(errors: List[Dict[str, Any]]) -> str:
    """Pick the message of the first validation error."""
    if not errors:
        return DEFAULT_VALIDATION_MESSAGE
    return str(errors[0].get("msg") or DEFAULT_VALIDATION_MESSAGE)
