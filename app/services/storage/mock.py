"""
Mock Storage Service Implementation

Keeps uploaded objects in memory. Used in development mode
(ENV_MODE=development) so image uploads work without AWS credentials.
"""

import logging
from typing import Optional

from app.services.storage.base import BaseStorageService, UploadResult

logger = logging.getLogger(__name__)


class MockStorageService(BaseStorageService):
    """
    In-memory object store.

    Attributes:
        base_url: Prefix of the URLs returned for stored objects
        objects: Stored objects, key -> (bytes, content type)
    """

    def __init__(self, base_url: str = "http://localhost:3000/mock-storage"):
        self.base_url = base_url.rstrip("/")
        self.objects: dict[str, tuple[bytes, Optional[str]]] = {}

        logger.info(f"MockStorageService initialized (base_url={self.base_url})")

    @property
    def provider_name(self) -> str:
        """Return the provider name."""
        return "mock"

    async def upload(
        self,
        data: bytes,
        key: str,
        content_type: Optional[str] = None,
    ) -> UploadResult:
        """Store the object in memory and return a fake public URL."""
        self.objects[key] = (data, content_type)
        url = f"{self.base_url}/{key}"

        logger.info(f"Mock: Stored {len(data)} bytes at {key}")
        return UploadResult(success=True, key=key, url=url)

    async def health_check(self) -> bool:
        """Mock health check always returns True."""
        return True
