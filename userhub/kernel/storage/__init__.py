from userhub.kernel.storage.object_store import (
    AVATAR_PREFIX,
    InMemoryObjectStore,
    ObjectStore,
    S3ObjectStore,
    avatar_key,
    endpoint_url_for,
)

__all__ = [
    "AVATAR_PREFIX",
    "InMemoryObjectStore",
    "ObjectStore",
    "S3ObjectStore",
    "avatar_key",
    "endpoint_url_for",
]
