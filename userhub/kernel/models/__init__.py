"""
Kernel Data Models
"""

from userhub.kernel.models.base import Base, TimestampMixin, generate_id
from userhub.kernel.models.user import User, USER_WRITABLE_FIELDS

__all__ = [
    "Base",
    "TimestampMixin",
    "generate_id",
    "User",
    "USER_WRITABLE_FIELDS",
]
