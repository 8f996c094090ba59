"""Domain-level exceptions.

Services raise these errors to express business rule violations.
The application's exception handlers map them to HTTP status codes and
render them as `{"message": ...}` bodies.
"""

from typing import Optional


class UserHubError(Exception):
    """Base class for all domain errors."""

    status_code = 400
    default_message = "Erro ao processar requisição"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(UserHubError):
    """Malformed or missing input fields."""

    default_message = "Dados inválidos"


class ConflictError(UserHubError):
    """E-mail already belongs to another user."""

    default_message = "E-mail já cadastrado"


class AuthError(UserHubError):
    """Login failed. Deliberately says nothing about which part was wrong."""

    status_code = 401
    default_message = "Credenciais inválidas"


class TokenMissingError(AuthError):
    """No bearer token accompanied a protected request."""

    default_message = "Token não fornecido"


class TokenInvalidError(AuthError):
    """Bearer token is malformed, expired or has a bad signature."""

    status_code = 403
    default_message = "Token inválido"


class NotFoundError(UserHubError):
    """Requested user does not exist."""

    status_code = 404
    default_message = "Usuário não encontrado"
