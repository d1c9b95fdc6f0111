# This project was developed with assistance from AI tools.
"""S3-compatible object storage (MinIO in development).

Browsers upload straight to storage with presigned PUT URLs; the API only
hands out URLs and records object keys. The boto3 client is synchronous, so
calls run in the default thread-pool executor. The module exposes a singleton
initialised at app startup via ``init_storage_service()``.
"""

import asyncio
import logging
import os
import uuid
from functools import partial

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import ClientError

from ..core.config import Settings

logger = logging.getLogger(__name__)

_MISSING_CODES = frozenset({"404", "NoSuchKey", "NoSuchBucket", "NotFound"})


def _is_missing(exc: ClientError) -> bool:
    return exc.response.get("Error", {}).get("Code") in _MISSING_CODES


class StorageService:
    """Thin wrapper around a boto3 S3 client."""

    def __init__(
        self,
        endpoint: str,
        access_key: str,
        secret_key: str,
        bucket: str,
        region: str = "us-east-1",
    ):
        self._bucket = bucket
        self._client = boto3.client(
            "s3",
            endpoint_url=endpoint,
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
            region_name=region,
            config=BotoConfig(
                signature_version="s3v4",
                s3={
                    "addressing_style": "path",
                    "use_accelerate_endpoint": False,
                },
            ),
        )
        self._ensure_bucket()

    def _ensure_bucket(self) -> None:
        """Create the bucket on first start against an empty MinIO."""
        try:
            self._client.head_bucket(Bucket=self._bucket)
        except ClientError as exc:
            if not _is_missing(exc):
                raise
            logger.info("Creating S3 bucket: %s", self._bucket)
            self._client.create_bucket(Bucket=self._bucket)

    async def _call(self, method: str, *args, **kwargs):
        """Run a blocking client method in the default executor."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            None, partial(getattr(self._client, method), *args, **kwargs)
        )

    async def _presign(self, operation: str, expires_in: int, **params) -> str:
        return await self._call(
            "generate_presigned_url",
            operation,
            Params={"Bucket": self._bucket, **params},
            ExpiresIn=expires_in,
        )

    async def upload_file(self, file_data: bytes, object_key: str, content_type: str) -> str:
        """Write bytes received by the API and return the object key."""
        await self._call(
            "put_object",
            Bucket=self._bucket,
            Key=object_key,
            Body=file_data,
            ContentType=content_type,
        )
        return object_key

    async def get_upload_url(self, object_key: str, content_type: str, expires_in: int = 900) -> str:
        """Presigned PUT URL. The browser must send the same Content-Type."""
        return await self._presign(
            "put_object", expires_in, Key=object_key, ContentType=content_type
        )

    async def get_download_url(self, object_key: str, expires_in: int = 900) -> str:
        return await self._presign("get_object", expires_in, Key=object_key)

    async def object_exists(self, object_key: str) -> bool:
        try:
            await self._call("head_object", Bucket=self._bucket, Key=object_key)
        except ClientError as exc:
            if _is_missing(exc):
                return False
            raise
        return True

    @staticmethod
    def build_object_key(owner: str, doc_type: str, filename: str) -> str:
        """Build the S3 object key: {owner}/{doc_type}/{uuid}-{filename}.

        ``owner`` is an application reference number, or a draft prefix from
        ``draft_owner()`` for uploads made before the application exists.
        Strips path components from filename to prevent path traversal attacks.
        """
        safe_name = os.path.basename(filename.replace("\\", "/")) or "document"
        return f"{owner}/{doc_type}/{uuid.uuid4().hex}-{safe_name}"

    @staticmethod
    def draft_owner(user_id: str) -> str:
        return f"drafts/{user_id}"


# ---------------------------------------------------------------------------
# Module-level singleton
# ---------------------------------------------------------------------------

_service: StorageService | None = None


def init_storage_service(cfg: Settings) -> StorageService:
    """Initialise the singleton (called once from app lifespan)."""
    global _service  # noqa: PLW0603
    _service = StorageService(
        endpoint=cfg.S3_ENDPOINT,
        access_key=cfg.S3_ACCESS_KEY,
        secret_key=cfg.S3_SECRET_KEY,
        bucket=cfg.S3_BUCKET,
        region=cfg.S3_REGION,
    )
    logger.info("StorageService initialised (bucket=%s)", cfg.S3_BUCKET)
    return _service


def get_storage_service() -> StorageService:
    """Return the initialised StorageService singleton."""
    if _service is None:
        raise RuntimeError("StorageService not initialised -- call init_storage_service() first")
    return _service
