"""
User and authentication schemas.

Wire names are camelCase (firstName, birthDay, ...); snake_case is accepted too.
Validation messages are the user-facing texts shown by the client.
"""

from datetime import date, datetime
from typing import Any, Dict, Optional

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

MIN_PASSWORD_LENGTH = 6


def _fail(message: str) -> PydanticCustomError:
    return PydanticCustomError("value_error", message)


def _check_email(value: Any) -> str:
    email = value.strip() if isinstance(value, str) else ""
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        raise _fail("E-mail inválido")
    return email


def _parse_birth_day(value: Any) -> date:
    if isinstance(value, date):
        return value
    text = value.strip() if isinstance(value, str) else ""
    if not text:
        raise _fail("Data de nascimento é obrigatória")
    try:
        return date.fromisoformat(text)
    except ValueError:
        raise _fail("Data de nascimento inválida")


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_default=True,
    )


class UserCreate(CamelModel):
    """Registration and admin-create request."""

    first_name: str = ""
    last_name: str = ""
    birth_day: Optional[date] = None
    email: str = ""
    password: str = ""

    @field_validator("first_name", mode="before")
    @classmethod
    def validate_first_name(cls, v: Any) -> str:
        if not isinstance(v, str) or not v.strip():
            raise _fail("Nome é obrigatório")
        return v.strip()

    @field_validator("last_name", mode="before")
    @classmethod
    def validate_last_name(cls, v: Any) -> str:
        if not isinstance(v, str) or not v.strip():
            raise _fail("Sobrenome é obrigatório")
        return v.strip()

    @field_validator("birth_day", mode="before")
    @classmethod
    def validate_birth_day(cls, v: Any) -> date:
        return _parse_birth_day(v)

    @field_validator("email", mode="before")
    @classmethod
    def validate_email_address(cls, v: Any) -> str:
        return _check_email(v)

    @field_validator("password", mode="before")
    @classmethod
    def validate_password(cls, v: Any) -> str:
        if not isinstance(v, str) or len(v) < MIN_PASSWORD_LENGTH:
            raise _fail("Senha deve ter pelo menos 6 caracteres")
        return v


class UserUpdate(CamelModel):
    """Partial update. Blank or missing fields keep their stored values."""

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    birth_day: Optional[date] = None
    email: Optional[str] = None
    password: Optional[str] = None

    @field_validator("first_name", "last_name", mode="before")
    @classmethod
    def strip_names(cls, v: Any) -> Optional[str]:
        v = _blank_to_none(v)
        return v.strip() if isinstance(v, str) else v

    @field_validator("birth_day", mode="before")
    @classmethod
    def validate_birth_day(cls, v: Any) -> Optional[date]:
        v = _blank_to_none(v)
        return None if v is None else _parse_birth_day(v)

    @field_validator("email", mode="before")
    @classmethod
    def validate_email_address(cls, v: Any) -> Optional[str]:
        v = _blank_to_none(v)
        return None if v is None else _check_email(v)

    @field_validator("password", mode="before")
    @classmethod
    def validate_password(cls, v: Any) -> Optional[str]:
        v = _blank_to_none(v)
        if v is not None and (not isinstance(v, str) or len(v) < MIN_PASSWORD_LENGTH):
            raise _fail("Senha deve ter pelo menos 6 caracteres")
        return v

    def provided_fields(self) -> Dict[str, Any]:
        """Fields the caller actually supplied, keyed by column name."""
        return self.model_dump(exclude_none=True)


class LoginRequest(CamelModel):
    """User login request."""

    email: str = ""
    password: str = ""

    @field_validator("email", mode="before")
    @classmethod
    def validate_email_address(cls, v: Any) -> str:
        return _check_email(v)

    @field_validator("password", mode="before")
    @classmethod
    def validate_password(cls, v: Any) -> str:
        if not isinstance(v, str) or not v:
            raise _fail("Senha é obrigatória")
        return v


class UserPublic(BaseModel):
    """User profile as returned to clients. Never carries the password hash."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    id: str
    first_name: str
    last_name: str
    birth_day: date
    email: str
    avatar_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class LoginResponse(BaseModel):
    """Successful login: the public profile and a bearer token."""

    user: UserPublic
    token: str
