"""Storage backend abstract base class.

Defines the interface for cover image storage backends (MinIO, local
filesystem). Consumers should use get_storage() from storage.py to get the
active backend.
"""
from abc import ABC, abstractmethod
from typing import Optional


class StorageBackend(ABC):
    """Abstract base class for storage backends."""

    @abstractmethod
    def upload_bytes(
        self,
        data: bytes,
        object_name: str,
        content_type: Optional[str] = None,
    ) -> str:
        """Upload bytes to storage.

        Args:
            data: File content
            object_name: Object name/key in storage
            content_type: MIME type of the file

        Returns:
            The object name/key
        """
        ...

    @abstractmethod
    def get_public_url(self, object_name: str) -> str:
        """URL a browser can load the object from."""
        ...

    @abstractmethod
    def delete_object(self, object_name: str) -> None:
        """Delete an object from storage."""
        ...

    @abstractmethod
    def object_exists(self, object_name: str) -> bool:
        """Check if an object exists in storage."""
        ...
