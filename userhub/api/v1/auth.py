"""
Authentication endpoints.
"""

from fastapi import APIRouter, status

from userhub.api.deps import Identity
from userhub.schemas.common import MessageResponse
from userhub.schemas.users import LoginRequest, LoginResponse, UserCreate

router = APIRouter()


@router.post("/register", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def register(data: UserCreate, identity: Identity):
    """
    Register a new user account.

    No token is returned; the client logs in afterwards.
    """
    await identity.register(data)
    return MessageResponse(message="Usuário criado com sucesso")


@router.post("/login", response_model=LoginResponse)
async def login(data: LoginRequest, identity: Identity):
    """Authenticate user and return the public profile with a bearer token."""
    result = await identity.login(data.email, data.password)
    return LoginResponse(user=result.user, token=result.token)
