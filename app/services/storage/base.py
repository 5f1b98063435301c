"""
Object Storage Service Abstract Base Class

Defines the interface contract for storing menu item images.
Both MockStorageService and S3StorageService implement it: bytes go in,
a public URL comes out.
"""

import re
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

_UNSAFE_KEY_CHARS = re.compile(r"[^a-z0-9]")


def sanitize_key_part(value: str) -> str:
    """Lowercase ``value`` and replace every char outside [a-z0-9] with '-'."""
    return _UNSAFE_KEY_CHARS.sub("-", value.lower())


def file_extension(filename: Optional[str]) -> str:
    """Suffix from the last '.' of ``filename`` (dot included), or ''."""
    if not filename or "." not in filename:
        return ""
    return filename[filename.rindex("."):]


def build_object_key(restaurant_name: str, item_name: str, filename: Optional[str]) -> str:
    """
    Build the storage key for a menu item image.

    Example:
        >>> build_object_key("Spice Route", "Masala Dosa", "dosa.JPG")
        'spice-route/masala-dosa-1b4e28ba-2fa1-11d2-883f-0016d3cca427.JPG'
    """
    return (
        f"{sanitize_key_part(restaurant_name)}/"
        f"{sanitize_key_part(item_name)}-{uuid.uuid4()}{file_extension(filename)}"
    )


@dataclass
class UploadResult:
    """
    Standardized result from an upload.

    Attributes:
        success: Whether the object was stored
        key: Object key inside the bucket
        url: Public URL of the stored object
        error_message: Error description if the upload failed
    """
    success: bool
    key: Optional[str] = None
    url: Optional[str] = None
    error_message: Optional[str] = None


class BaseStorageService(ABC):
    """
    Abstract base class for object storage services.

    Example:
        >>> service = get_storage_service()
        >>> result = await service.upload(data, key, "image/jpeg")
        >>> print(result.url)
    """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the name of the storage provider (e.g. "mock", "s3")."""
        pass

    @abstractmethod
    async def upload(
        self,
        data: bytes,
        key: str,
        content_type: Optional[str] = None,
    ) -> UploadResult:
        """
        Store ``data`` under ``key``.

        Args:
            data: Raw file bytes
            key: Object key, see ``build_object_key``
            content_type: MIME type recorded with the object

        Returns:
            UploadResult: Contains the public URL on success
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check whether the storage backend is reachable."""
        pass
