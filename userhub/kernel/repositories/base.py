from typing import Any, Dict, List, Optional, Protocol

from userhub.kernel.models.user import User


class UserRepository(Protocol):
    """Protocol defining the interface for user data access.

    Implementations must enforce e-mail uniqueness themselves and raise
    ConflictError when a write would break it.
    """

    async def get_by_id(self, user_id: str) -> Optional[User]:
        """Find a user by ID. Return User or None if not found."""
        ...

    async def get_by_email(self, email: str) -> Optional[User]:
        """Find a user by exact e-mail. Return User or None if not found."""
        ...

    async def get_all(self) -> List[User]:
        """Return every user, no pagination."""
        ...

    async def create(self, fields: Dict[str, Any]) -> User:
        """Create a user from the given fields and assign a fresh id."""
        ...

    async def update(self, user_id: str, fields: Dict[str, Any]) -> Optional[User]:
        """Replace only the given fields. Return None if the id is unknown."""
        ...

    async def delete(self, user_id: str) -> bool:
        """Remove a user. Return True if a record existed."""
        ...
