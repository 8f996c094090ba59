from userhub.kernel.activity.activity_log import (
    ActivityAction,
    ActivityLog,
    ActivityLogEntry,
    InMemoryActivityLog,
    RedisActivityLog,
)

__all__ = [
    "ActivityAction",
    "ActivityLog",
    "ActivityLogEntry",
    "InMemoryActivityLog",
    "RedisActivityLog",
]
