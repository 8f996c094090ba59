"""
User directory endpoints. All routes require a bearer token.

Create and update take multipart form data so an avatar file can ride along.
"""

from typing import Annotated, Any, List, Optional, Type, TypeVar

from fastapi import APIRouter, File, Form, UploadFile, status
from pydantic import BaseModel, ValidationError as PydanticValidationError

from userhub.api.deps import CurrentContext, Identity
from userhub.kernel.errors import ValidationError
from userhub.kernel.identity.identity_service import AvatarUpload
from userhub.schemas.common import MessageResponse, first_error_message
from userhub.schemas.users import UserCreate, UserPublic, UserUpdate

router = APIRouter()

M = TypeVar("M", bound=BaseModel)


def _parse_form(model: Type[M], **values: Any) -> M:
    try:
        return model.model_validate(values)
    except PydanticValidationError as e:
        raise ValidationError(first_error_message(e.errors())) from e


async def _read_avatar(avatar: Optional[UploadFile]) -> Optional[AvatarUpload]:
    if avatar is None:
        return None
    return AvatarUpload(
        filename=avatar.filename,
        content_type=avatar.content_type,
        data=await avatar.read(),
    )


@router.get("", response_model=List[UserPublic])
async def list_users(context: CurrentContext, identity: Identity):
    """List every user's public profile."""
    return await identity.list_users()


@router.get("/{user_id}", response_model=UserPublic)
async def get_user(user_id: str, context: CurrentContext, identity: Identity):
    return await identity.get_user(user_id)


@router.post("", response_model=UserPublic, status_code=status.HTTP_201_CREATED)
async def create_user(
    context: CurrentContext,
    identity: Identity,
    first_name: Annotated[str, Form(alias="firstName")] = "",
    last_name: Annotated[str, Form(alias="lastName")] = "",
    birth_day: Annotated[str, Form(alias="birthDay")] = "",
    email: Annotated[str, Form()] = "",
    password: Annotated[str, Form()] = "",
    avatar: Annotated[Optional[UploadFile], File()] = None,
):
    """
    Create a user. Same rules as registration; an avatar upload failure
    still creates the user, just without an avatar.
    """
    data = _parse_form(
        UserCreate,
        first_name=first_name,
        last_name=last_name,
        birth_day=birth_day,
        email=email,
        password=password,
    )
    return await identity.create_user(data, context, avatar=await _read_avatar(avatar))


@router.put("/{user_id}", response_model=UserPublic)
async def update_user(
    user_id: str,
    context: CurrentContext,
    identity: Identity,
    first_name: Annotated[Optional[str], Form(alias="firstName")] = None,
    last_name: Annotated[Optional[str], Form(alias="lastName")] = None,
    birth_day: Annotated[Optional[str], Form(alias="birthDay")] = None,
    email: Annotated[Optional[str], Form()] = None,
    password: Annotated[Optional[str], Form()] = None,
    avatar: Annotated[Optional[UploadFile], File()] = None,
):
    """Partially update a user. Blank fields keep their stored values."""
    data = _parse_form(
        UserUpdate,
        first_name=first_name,
        last_name=last_name,
        birth_day=birth_day,
        email=email,
        password=password,
    )
    return await identity.update_user(user_id, data, context, avatar=await _read_avatar(avatar))


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(user_id: str, context: CurrentContext, identity: Identity):
    await identity.delete_user(user_id, context)
    return MessageResponse(message="Usuário excluído com sucesso")
