"""In-memory implementation of UserRepository for testing."""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from userhub.kernel.errors import ConflictError
from userhub.kernel.models.base import generate_id
from userhub.kernel.models.user import User, USER_WRITABLE_FIELDS


class InMemoryUserRepository:
    def __init__(self):
        self.store: Dict[str, User] = {}
        self.writes = 0

    # ── write operations ─────────────────────────────────────

    async def create(self, fields: Dict[str, Any]) -> User:
        self._check_email_free(fields.get("email"))

        now = datetime.now(timezone.utc)
        values = {"avatar_url": None}
        values.update({k: v for k, v in fields.items() if k in USER_WRITABLE_FIELDS})
        user = User(id=generate_id(), created_at=now, updated_at=now, **values)
        self.store[user.id] = user
        self.writes += 1
        return user

    async def update(self, user_id: str, fields: Dict[str, Any]) -> Optional[User]:
        user = self.store.get(user_id)
        if user is None:
            return None

        if "email" in fields:
            self._check_email_free(fields["email"], exclude_id=user_id)

        for key, value in fields.items():
            if key in USER_WRITABLE_FIELDS:
                setattr(user, key, value)
        user.updated_at = datetime.now(timezone.utc)
        self.writes += 1
        return user

    async def delete(self, user_id: str) -> bool:
        if self.store.pop(user_id, None) is None:
            return False
        self.writes += 1
        return True

    # ── read operations ──────────────────────────────────────

    async def get_by_id(self, user_id: str) -> Optional[User]:
        return self.store.get(user_id)

    async def get_by_email(self, email: str) -> Optional[User]:
        for user in self.store.values():
            if user.email == email:
                return user
        return None

    async def get_all(self) -> List[User]:
        return list(self.store.values())

    def _check_email_free(self, email: Optional[str], exclude_id: Optional[str] = None) -> None:
        for user in self.store.values():
            if user.email == email and user.id != exclude_id:
                raise ConflictError()
