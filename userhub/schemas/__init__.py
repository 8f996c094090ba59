"""
Pydantic schemas for API request/response validation.
"""

from userhub.schemas.common import HealthResponse, MessageResponse, first_error_message
from userhub.schemas.users import (
    LoginRequest,
    LoginResponse,
    UserCreate,
    UserPublic,
    UserUpdate,
)

__all__ = [
    "HealthResponse",
    "MessageResponse",
    "first_error_message",
    "LoginRequest",
    "LoginResponse",
    "UserCreate",
    "UserPublic",
    "UserUpdate",
]
