"""
S3 Storage Service Implementation

Production implementation using boto3.
Used when ENV_MODE=production or ENV_MODE=staging.

Requirements:
    - AWS_REGION, AWS_BUCKET_NAME
    - AWS_ACCESS_KEY_ID, AWS_SECRET_ACCESS_KEY
"""

import asyncio
import logging
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from app.core.config import get_settings
from app.services.storage.base import BaseStorageService, UploadResult

logger = logging.getLogger(__name__)


class S3StorageService(BaseStorageService):
    """
    Stores menu item images in an S3 bucket.

    boto3 is synchronous, so calls run in a worker thread to keep the event
    loop free while the upload is in flight.
    """

    def __init__(self):
        """
        Initialize the S3 client from settings.

        Raises:
            ValueError: If the bucket or region is not configured
        """
        settings = get_settings()

        if not settings.aws_bucket_name or not settings.aws_region:
            raise ValueError(
                "AWS_BUCKET_NAME and AWS_REGION are required for production mode. "
                "Set them in your .env file or environment variables."
            )

        self._bucket = settings.aws_bucket_name
        self._region = settings.aws_region
        self._client = boto3.client(
            "s3",
            region_name=settings.aws_region,
            aws_access_key_id=settings.aws_access_key_id,
            aws_secret_access_key=settings.aws_secret_access_key,
        )

        logger.info(f"S3StorageService initialized (bucket={self._bucket}, region={self._region})")

    @property
    def provider_name(self) -> str:
        """Return the provider name."""
        return "s3"

    def public_url(self, key: str) -> str:
        """Virtual-hosted style URL of an object in the bucket."""
        return f"https://{self._bucket}.s3.{self._region}.amazonaws.com/{key}"

    async def upload(
        self,
        data: bytes,
        key: str,
        content_type: Optional[str] = None,
    ) -> UploadResult:
        """Put the object in the bucket and return its public URL."""
        params = {"Bucket": self._bucket, "Key": key, "Body": data}
        if content_type:
            params["ContentType"] = content_type

        try:
            await asyncio.to_thread(self._client.put_object, **params)
        except (BotoCoreError, ClientError) as e:
            logger.error(f"S3 upload failed for {key}: {e}")
            return UploadResult(success=False, key=key, error_message=str(e))

        logger.info(f"S3: Uploaded {len(data)} bytes to {key}")
        return UploadResult(success=True, key=key, url=self.public_url(key))

    async def health_check(self) -> bool:
        """Check that the bucket exists and is reachable."""
        try:
            await asyncio.to_thread(self._client.head_bucket, Bucket=self._bucket)
            return True
        except (BotoCoreError, ClientError) as e:
            logger.error(f"S3 health check failed: {e}")
            return False
