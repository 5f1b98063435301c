"""
Storage Service Factory

Returns the mock in-memory store or S3 based on ENV_MODE.

Usage:
    from app.services.storage import get_storage_service

    storage = get_storage_service()
    result = await storage.upload(data, key, "image/png")
"""

import logging
from functools import lru_cache

from app.core.config import get_settings
from app.services.storage.base import (
    BaseStorageService,
    UploadResult,
    build_object_key,
)
from app.services.storage.mock import MockStorageService
from app.services.storage.s3 import S3StorageService

logger = logging.getLogger(__name__)


@lru_cache()
def get_storage_service() -> BaseStorageService:
    """
    Get the configured storage service instance.

    Raises:
        ValueError: If production mode but the bucket is not configured
    """
    settings = get_settings()

    if settings.is_development:
        logger.info("Storage Service: Using MockStorageService (development mode)")
        return MockStorageService(base_url=f"{settings.app_base_url}/mock-storage")
    else:
        logger.info(f"Storage Service: Using S3StorageService ({settings.env_mode.value} mode)")
        return S3StorageService()


def reset_storage_service() -> None:
    """Clear the cached service instance."""
    get_storage_service.cache_clear()
    logger.debug("Storage service cache cleared")


__all__ = [
    "get_storage_service",
    "reset_storage_service",
    "BaseStorageService",
    "UploadResult",
    "build_object_key",
    "MockStorageService",
    "S3StorageService",
]
