"""
Activity log: an append-only window of the most recent user events.

The Redis adapter keeps a capped list (LPUSH + LTRIM), newest first.
"""

import json
from collections import deque
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Deque, Dict, List, Optional, Protocol

import redis.asyncio as redis
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from redis.exceptions import RedisError

from userhub.config import Settings
from userhub.kernel.outcome import SideEffectResult
from userhub.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_MAX_ENTRIES = 1000


class ActivityAction(str, Enum):
    """Actions recorded in the activity log."""

    USER_REGISTERED = "user_registered"
    USER_LOGIN = "user_login"
    USER_CREATED = "user_created"
    USER_UPDATED = "user_updated"
    USER_DELETED = "user_deleted"


class ActivityLogEntry(BaseModel):
    """One activity record as stored and served."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    user_id: str
    action: str
    details: Optional[Dict[str, Any]] = None
    timestamp: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())


class ActivityLog(Protocol):
    async def record(
        self,
        user_id: str,
        action: ActivityAction,
        details: Optional[Dict[str, Any]] = None,
    ) -> SideEffectResult:
        """Append an entry. Failures come back as a degraded result, never raised."""
        ...

    async def recent(self, limit: int = 50) -> List[ActivityLogEntry]:
        """Most recent entries, newest first."""
        ...

    async def close(self) -> None:
        ...


def _entry(user_id: str, action: ActivityAction, details: Optional[Dict[str, Any]]) -> ActivityLogEntry:
    return ActivityLogEntry(user_id=user_id, action=ActivityAction(action).value, details=details)


class RedisActivityLog:
    def __init__(
        self,
        client: redis.Redis,
        key: str = "activity_logs",
        max_entries: int = DEFAULT_MAX_ENTRIES,
    ):
        self.client = client
        self.key = key
        self.max_entries = max_entries

    @classmethod
    def from_settings(cls, settings: Settings) -> "RedisActivityLog":
        client = redis.from_url(
            settings.redis_url,
            decode_responses=True,
            socket_connect_timeout=5,
            socket_timeout=5,
        )
        return cls(client, settings.activity_log_key, settings.activity_log_max_entries)

    async def record(
        self,
        user_id: str,
        action: ActivityAction,
        details: Optional[Dict[str, Any]] = None,
    ) -> SideEffectResult:
        entry = _entry(user_id, action, details)
        payload = json.dumps(entry.model_dump(by_alias=True), default=str)
        try:
            async with self.client.pipeline(transaction=True) as pipe:
                pipe.lpush(self.key, payload)
                pipe.ltrim(self.key, 0, self.max_entries - 1)
                await pipe.execute()
        except (RedisError, OSError) as e:
            return SideEffectResult.failure(f"activity log append failed: {e}")
        return SideEffectResult.success()

    async def recent(self, limit: int = 50) -> List[ActivityLogEntry]:
        try:
            raw = await self.client.lrange(self.key, 0, limit - 1)
        except (RedisError, OSError) as e:
            logger.warning("Could not read activity log: %s", e)
            return []

        entries = []
        for item in raw:
            try:
                entries.append(ActivityLogEntry.model_validate(json.loads(item)))
            except ValueError:
                logger.warning("Skipping unreadable activity log entry")
        return entries

    async def close(self) -> None:
        await self.client.aclose()


class InMemoryActivityLog:
    """Bounded deque with the same newest-first semantics. Set `available = False` to simulate an outage."""

    def __init__(self, max_entries: int = DEFAULT_MAX_ENTRIES):
        self.entries: Deque[ActivityLogEntry] = deque(maxlen=max_entries)
        self.available = True

    async def record(
        self,
        user_id: str,
        action: ActivityAction,
        details: Optional[Dict[str, Any]] = None,
    ) -> SideEffectResult:
        if not self.available:
            return SideEffectResult.failure("activity log unavailable")
        self.entries.appendleft(_entry(user_id, action, details))
        return SideEffectResult.success()

    async def recent(self, limit: int = 50) -> List[ActivityLogEntry]:
        return list(self.entries)[:limit]

    async def close(self) -> None:
        return None
