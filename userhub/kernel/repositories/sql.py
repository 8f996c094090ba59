"""SQLAlchemy implementation of UserRepository."""

from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from userhub.kernel.errors import ConflictError
from userhub.kernel.models.user import User, USER_WRITABLE_FIELDS
from userhub.logging_config import get_logger

logger = get_logger(__name__)


def _writable(fields: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in fields.items() if k in USER_WRITABLE_FIELDS}


class SqlUserRepository:
    """
    User storage backed by a relational database.

    Every mutation is its own unit of work and is committed before the
    method returns, so a failed commit surfaces to the caller instead of
    after the response. The unique index on users.email is the authority
    for uniqueness: a concurrent writer that loses the race gets
    ConflictError.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, user_id: str) -> Optional[User]:
        return await self.session.get(User, user_id)

    async def get_by_email(self, email: str) -> Optional[User]:
        query = select(User).where(User.email == email)
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_all(self) -> List[User]:
        result = await self.session.execute(select(User).order_by(User.created_at))
        return list(result.scalars().all())

    async def create(self, fields: Dict[str, Any]) -> User:
        user = User(**_writable(fields))
        self.session.add(user)
        await self._commit(email=user.email)
        await self.session.refresh(user)
        return user

    async def update(self, user_id: str, fields: Dict[str, Any]) -> Optional[User]:
        user = await self.get_by_id(user_id)
        if user is None:
            return None

        for key, value in _writable(fields).items():
            setattr(user, key, value)

        await self._commit(email=user.email)
        await self.session.refresh(user)
        return user

    async def delete(self, user_id: str) -> bool:
        user = await self.get_by_id(user_id)
        if user is None:
            return False
        await self.session.delete(user)
        await self.session.commit()
        return True

    async def _commit(self, email: str) -> None:
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            logger.info("E-mail uniqueness constraint rejected write", extra={"email": email})
            raise ConflictError() from e
