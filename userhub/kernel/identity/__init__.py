"""
Identity Core - Authentication and user lifecycle.
"""

from userhub.kernel.identity.password import PasswordHasher
from userhub.kernel.identity.context import RequestContext
from userhub.kernel.identity.jwt import TokenClaims, TokenService
from userhub.kernel.identity.identity_service import AvatarUpload, IdentityService, LoginResult

__all__ = [
    "PasswordHasher",
    "RequestContext",
    "TokenClaims",
    "TokenService",
    "AvatarUpload",
    "IdentityService",
    "LoginResult",
]
