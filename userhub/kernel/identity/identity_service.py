"""
Identity service: registration, login and the user directory lifecycle.
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Dict, List, NamedTuple, Optional

from userhub.kernel.activity import ActivityAction, ActivityLog
from userhub.kernel.errors import AuthError, ConflictError, NotFoundError
from userhub.kernel.identity.context import RequestContext
from userhub.kernel.identity.jwt import TokenClaims, TokenService
from userhub.kernel.identity.password import PasswordHasher
from userhub.kernel.repositories import UserRepository
from userhub.kernel.storage import ObjectStore, avatar_key
from userhub.logging_config import get_logger
from userhub.schemas.users import UserCreate, UserPublic, UserUpdate

logger = get_logger(__name__)


@dataclass
class AvatarUpload:
    """An uploaded avatar file, already read into memory."""

    filename: Optional[str]
    content_type: Optional[str]
    data: bytes


class LoginResult(NamedTuple):
    user: UserPublic
    token: str


class IdentityService:
    """
    Service for user identity operations.

    Every operation runs validate -> check -> mutate -> log -> respond.
    Avatar uploads and activity entries are best effort: their failures are
    logged and never fail the surrounding operation. Results are always the
    public projection, so password hashes never leave this service.
    """

    def __init__(
        self,
        users: UserRepository,
        tokens: TokenService,
        object_store: ObjectStore,
        activity_log: ActivityLog,
        hasher=PasswordHasher,
    ):
        self.users = users
        self.tokens = tokens
        self.object_store = object_store
        self.activity_log = activity_log
        self.hasher = hasher

    async def register(self, data: UserCreate) -> UserPublic:
        """
        Register a new user. No token is issued; the caller logs in separately.

        Raises:
            ConflictError: If the e-mail is already registered
        """
        await self._ensure_email_free(data.email)

        user = await self.users.create(await self._new_user_fields(data))

        logger.info("User registered", extra={"user_id": user.id})
        await self._record(user.id, ActivityAction.USER_REGISTERED, {"email": user.email})
        return UserPublic.model_validate(user)

    async def login(self, email: str, password: str) -> LoginResult:
        """
        Authenticate by e-mail and password.

        Raises:
            AuthError: Same error for an unknown e-mail and a wrong password
        """
        user = await self.users.get_by_email(email)
        if user is None or not await asyncio.to_thread(self.hasher.verify, password, user.password):
            raise AuthError()

        public = UserPublic.model_validate(user)
        token = self.tokens.issue(TokenClaims(id=public.id, email=public.email))

        await self._record(user.id, ActivityAction.USER_LOGIN, {"email": user.email})
        return LoginResult(user=public, token=token)

    async def list_users(self) -> List[UserPublic]:
        return [UserPublic.model_validate(u) for u in await self.users.get_all()]

    async def get_user(self, user_id: str) -> UserPublic:
        user = await self.users.get_by_id(user_id)
        if user is None:
            raise NotFoundError()
        return UserPublic.model_validate(user)

    async def create_user(
        self,
        data: UserCreate,
        context: RequestContext,
        avatar: Optional[AvatarUpload] = None,
    ) -> UserPublic:
        """
        Create a user on behalf of an authenticated caller.

        Raises:
            ConflictError: If the e-mail is already registered
        """
        await self._ensure_email_free(data.email)

        fields = await self._new_user_fields(data)
        avatar_url = await self._store_avatar(avatar)
        if avatar_url:
            fields["avatar_url"] = avatar_url

        user = await self.users.create(fields)

        logger.info("User created", extra={"user_id": user.id, "actor_id": context.user_id})
        await self._record(
            context.user_id,
            ActivityAction.USER_CREATED,
            {"newUserId": user.id, "email": user.email},
        )
        return UserPublic.model_validate(user)

    async def update_user(
        self,
        user_id: str,
        data: UserUpdate,
        context: RequestContext,
        avatar: Optional[AvatarUpload] = None,
    ) -> UserPublic:
        """
        Replace the provided fields of a user.

        An empty update set returns the stored record without writing.

        Raises:
            NotFoundError: If the user does not exist
            ConflictError: If the new e-mail belongs to another user
        """
        existing = await self.users.get_by_id(user_id)
        if existing is None:
            raise NotFoundError()

        changes = data.provided_fields()

        if "email" in changes and changes["email"] != existing.email:
            await self._ensure_email_free(changes["email"])

        if "password" in changes:
            changes["password"] = await self._hash(changes["password"])

        avatar_url = await self._store_avatar(avatar)
        if avatar_url:
            changes["avatar_url"] = avatar_url

        if not changes:
            return UserPublic.model_validate(existing)

        updated = await self.users.update(user_id, changes)
        if updated is None:
            raise NotFoundError()

        logger.info(
            "User updated",
            extra={"user_id": user_id, "actor_id": context.user_id, "fields": sorted(changes)},
        )
        await self._record(context.user_id, ActivityAction.USER_UPDATED, {"updatedUserId": user_id})
        return UserPublic.model_validate(updated)

    async def delete_user(self, user_id: str, context: RequestContext) -> None:
        """
        Raises:
            NotFoundError: If the user does not exist
        """
        if not await self.users.delete(user_id):
            raise NotFoundError()

        logger.info("User deleted", extra={"user_id": user_id, "actor_id": context.user_id})
        await self._record(context.user_id, ActivityAction.USER_DELETED, {"deletedUserId": user_id})

    async def _ensure_email_free(self, email: str) -> None:
        # Best-effort pre-check; the repository's unique constraint is authoritative
        if await self.users.get_by_email(email) is not None:
            raise ConflictError()

    async def _new_user_fields(self, data: UserCreate) -> Dict[str, Any]:
        fields = data.model_dump()
        fields["password"] = await self._hash(data.password)
        return fields

    async def _hash(self, password: str) -> str:
        # bcrypt is CPU bound; keep it off the event loop
        return await asyncio.to_thread(self.hasher.hash, password)

    async def _store_avatar(self, avatar: Optional[AvatarUpload]) -> Optional[str]:
        if avatar is None:
            return None

        result = await self.object_store.upload(avatar_key(avatar.filename), avatar.data, avatar.content_type)
        if result.degraded:
            logger.warning("Avatar upload failed, continuing without avatar: %s", result.error)
            return None
        return result.value

    async def _record(self, user_id: str, action: ActivityAction, details: Dict[str, Any]) -> None:
        result = await self.activity_log.record(user_id, action, details)
        if result.degraded:
            logger.warning(
                "Activity log append failed: %s", result.error,
                extra={"action": action.value},
            )
