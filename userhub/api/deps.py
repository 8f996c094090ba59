"""
FastAPI dependencies for services, database sessions and the access gate.
"""

from typing import Annotated, AsyncGenerator, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from userhub.kernel.errors import TokenInvalidError, TokenMissingError
from userhub.kernel.identity.context import RequestContext
from userhub.kernel.identity.identity_service import IdentityService
from userhub.kernel.repositories import SqlUserRepository
from userhub.logging_config import actor_id_var
from userhub.services import AppServices


# Security scheme
security = HTTPBearer(auto_error=False)


def get_services(request: Request) -> AppServices:
    """Service container built by the application lifespan."""
    return request.app.state.services


Services = Annotated[AppServices, Depends(get_services)]


async def get_db(services: Services) -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency that yields database sessions.

    Repositories commit their own writes; the exit code here may run after
    the response is sent, so it only discards unfinished work.
    """
    async with services.database.session_maker() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


DbSession = Annotated[AsyncSession, Depends(get_db)]


def get_identity_service(db: DbSession, services: Services) -> IdentityService:
    return IdentityService(
        users=SqlUserRepository(db),
        tokens=services.token_service,
        object_store=services.object_store,
        activity_log=services.activity_log,
    )


Identity = Annotated[IdentityService, Depends(get_identity_service)]


async def require_auth(
    request: Request,
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
    services: Services,
) -> RequestContext:
    """
    Access gate for every route except register and login.

    No bearer token -> 401, bad or expired token -> 403. The user record is
    not consulted; a token is valid until it expires.
    """
    if not credentials or not credentials.credentials:
        raise TokenMissingError()

    claims = services.token_service.verify(credentials.credentials)
    if claims is None:
        raise TokenInvalidError()

    # Handler-side logs pick the actor up from the contextvar, the access log from request.state
    actor_id_var.set(claims.id)
    request.state.actor_id = claims.id
    return RequestContext(
        user_id=claims.id,
        email=claims.email,
        request_id=getattr(request.state, "request_id", None),
    )


CurrentContext = Annotated[RequestContext, Depends(require_auth)]
