"""S3-compatible object storage for avatar images."""

import asyncio
import re
import uuid
from typing import Dict, Optional, Protocol

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from userhub.config import Settings
from userhub.kernel.outcome import SideEffectResult
from userhub.logging_config import get_logger

logger = get_logger(__name__)

AVATAR_PREFIX = "avatars/"


def avatar_key(filename: Optional[str]) -> str:
    """Fresh object key for an uploaded avatar: avatars/<uuid>-<filename>."""
    name = (filename or "avatar").replace("/", "_")
    return f"{AVATAR_PREFIX}{uuid.uuid4()}-{name}"


def endpoint_url_for(endpoint: str) -> str:
    """
    Normalise a bare MinIO endpoint into a URL.

    Scheme and trailing slash are stripped; localhost talks plain HTTP on
    port 9000, anything else HTTPS on the default port.
    """
    host = re.sub(r"^https?://", "", endpoint.strip()).rstrip("/")
    if "localhost" in host:
        if ":" not in host:
            host = f"{host}:9000"
        return f"http://{host}"
    return f"https://{host}"


class ObjectStore(Protocol):
    async def ensure_bucket(self) -> None:
        ...

    async def upload(self, key: str, data: bytes, content_type: Optional[str]) -> SideEffectResult:
        """Store a blob. Failures come back as a degraded result, never raised."""
        ...


class S3ObjectStore:
    """
    Object store on any S3-compatible endpoint.

    boto3 is blocking, so every call runs in a worker thread.
    """

    def __init__(self, client, bucket: str, region: str = "us-east-1"):
        self.client = client
        self.bucket = bucket
        self.region = region

    @classmethod
    def from_settings(cls, settings: Settings) -> "S3ObjectStore":
        client = boto3.client(
            "s3",
            endpoint_url=endpoint_url_for(settings.minio_endpoint),
            aws_access_key_id=settings.minio_access_key,
            aws_secret_access_key=settings.minio_secret_key,
            region_name=settings.minio_region,
            config=Config(
                signature_version="s3v4",
                s3={"addressing_style": "path"},
                connect_timeout=settings.object_store_timeout_seconds,
                read_timeout=settings.object_store_timeout_seconds,
                retries={"max_attempts": 2},
            ),
        )
        return cls(client, settings.minio_bucket_name, settings.minio_region)

    async def ensure_bucket(self) -> None:
        """Create the bucket if missing. Unreachable storage is logged, not fatal."""
        try:
            await asyncio.to_thread(self._ensure_bucket_sync)
        except (BotoCoreError, ClientError) as e:
            logger.error(
                "Object storage unavailable, avatar uploads will be skipped: %s", e,
                extra={"bucket": self.bucket},
            )

    def _ensure_bucket_sync(self) -> None:
        try:
            self.client.head_bucket(Bucket=self.bucket)
            logger.info("Bucket %s already exists", self.bucket)
            return
        except ClientError as e:
            code = str(e.response.get("Error", {}).get("Code", ""))
            if code not in ("404", "NoSuchBucket", "NotFound"):
                raise

        params: Dict[str, object] = {"Bucket": self.bucket}
        if self.region != "us-east-1":
            params["CreateBucketConfiguration"] = {"LocationConstraint": self.region}
        self.client.create_bucket(**params)
        logger.info("Bucket %s created successfully", self.bucket)

    async def upload(self, key: str, data: bytes, content_type: Optional[str]) -> SideEffectResult:
        try:
            await asyncio.to_thread(
                self.client.put_object,
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentLength=len(data),
                ContentType=content_type or "application/octet-stream",
            )
        except (BotoCoreError, ClientError) as e:
            return SideEffectResult.failure(f"upload of {key} failed: {e}")
        return SideEffectResult.success(key)


class InMemoryObjectStore:
    """Dict-backed object store for tests. Set `available = False` to simulate an outage."""

    def __init__(self):
        self.objects: Dict[str, bytes] = {}
        self.content_types: Dict[str, Optional[str]] = {}
        self.available = True

    async def ensure_bucket(self) -> None:
        return None

    async def upload(self, key: str, data: bytes, content_type: Optional[str]) -> SideEffectResult:
        if not self.available:
            return SideEffectResult.failure("object store unavailable")
        self.objects[key] = data
        self.content_types[key] = content_type
        return SideEffectResult.success(key)
