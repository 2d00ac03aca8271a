from dataclasses import dataclass
from datetime import datetime

import aioboto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from fastapi import status

from src.api.core.constants import (
    DEFAULT_LIST_OBJECTS_MAX_KEYS,
    DEFAULT_SIGNED_URL_EXPIRY_SECONDS,
)
from src.api.core.exceptions.base import IridiumException
from src.api.core.messages import MessageCode
from src.utils.logger import get_logger
from src.utils.settings.storage import StorageSettings

logger = get_logger(__name__)


@dataclass
class StoredObject:
    key: str
    size: int
    last_modified: datetime | None


class StorageClient:
    """Client for an S3-compatible bucket (AWS S3, R2, MinIO)."""

    def __init__(self, settings: StorageSettings | None = None):
        self.settings = settings or StorageSettings()
        self._session: aioboto3.Session | None = None

    def _require_configured(self) -> None:
        if not self.settings.is_configured:
            raise IridiumException(
                MessageCode.STORAGE_NOT_CONFIGURED, status.HTTP_503_SERVICE_UNAVAILABLE
            )

    def _get_session(self) -> aioboto3.Session:
        if self._session is None:
            self._session = aioboto3.Session(
                aws_access_key_id=self.settings.AWS_ACCESS_KEY_ID,
                aws_secret_access_key=self.settings.AWS_SECRET_ACCESS_KEY.get_secret_value(),
                region_name=self.settings.AWS_DEFAULT_REGION,
            )
        return self._session

    def _client(self):
        config = Config(
            signature_version="s3v4",
            s3={"addressing_style": "path" if self.settings.AWS_FORCE_PATH_STYLE else "auto"},
        )
        return self._get_session().client(
            "s3", endpoint_url=self.settings.AWS_ENDPOINT_URL, config=config
        )

    def _storage_error(self, action: str, error: Exception) -> IridiumException:
        logger.error(f"Storage {action} failed: {error}")
        return IridiumException(
            MessageCode.EXTERNAL_SERVICE_ERROR,
            status.HTTP_502_BAD_GATEWAY,
            {"provider": "s3", "action": action},
        )

    async def list_objects(
        self, prefix: str = "", max_keys: int = DEFAULT_LIST_OBJECTS_MAX_KEYS
    ) -> list[StoredObject]:
        self._require_configured()
        try:
            async with self._client() as s3_client:
                response = await s3_client.list_objects_v2(
                    Bucket=self.settings.AWS_BUCKET_NAME, Prefix=prefix, MaxKeys=max_keys
                )
        except (ClientError, BotoCoreError) as e:
            raise self._storage_error("list", e) from e

        return [
            StoredObject(
                key=item["Key"],
                size=item.get("Size", 0),
                last_modified=item.get("LastModified"),
            )
            for item in response.get("Contents", [])
        ]

    async def upload_object(
        self, key: str, body: bytes, content_type: str | None = None
    ) -> StoredObject:
        self._require_configured()
        extra = {"ContentType": content_type} if content_type else {}
        try:
            async with self._client() as s3_client:
                await s3_client.put_object(
                    Bucket=self.settings.AWS_BUCKET_NAME, Key=key, Body=body, **extra
                )
        except (ClientError, BotoCoreError) as e:
            raise self._storage_error("upload", e) from e

        logger.info("Object uploaded", key=key, size=len(body))
        return StoredObject(key=key, size=len(body), last_modified=None)

    async def create_signed_download_url(
        self, key: str, expires_in: int = DEFAULT_SIGNED_URL_EXPIRY_SECONDS
    ) -> str:
        """Temporary SigV4 URL for downloading ``key``."""
        self._require_configured()
        try:
            async with self._client() as s3_client:
                return await s3_client.generate_presigned_url(
                    "get_object",
                    Params={"Bucket": self.settings.AWS_BUCKET_NAME, "Key": key},
                    ExpiresIn=expires_in,
                )
        except (ClientError, BotoCoreError) as e:
            raise self._storage_error("sign", e) from e
