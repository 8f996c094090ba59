"""
User repositories: the storage contract and its adapters.
"""

from userhub.kernel.repositories.base import UserRepository
from userhub.kernel.repositories.memory import InMemoryUserRepository
from userhub.kernel.repositories.sql import SqlUserRepository

__all__ = [
    "UserRepository",
    "InMemoryUserRepository",
    "SqlUserRepository",
]
