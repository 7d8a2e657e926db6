"""Active storage backend selection."""
from functools import lru_cache

from commons_youth.config import get_settings
from commons_youth.services.storage_base import StorageBackend


@lru_cache()
def get_storage() -> StorageBackend:
    """Get the storage backend configured by STORAGE_BACKEND."""
    settings = get_settings()
    if settings.STORAGE_BACKEND == "minio":
        from commons_youth.services.storage_minio import MinIOStorageBackend
        return MinIOStorageBackend(settings)

    from commons_youth.services.storage_local import LocalStorageBackend
    return LocalStorageBackend(settings.LOCAL_STORAGE_PATH)
