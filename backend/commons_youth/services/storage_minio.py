"""MinIO/S3 storage backend implementation."""
import io
import json
import logging
from typing import Optional

from minio import Minio
from minio.error import S3Error

from commons_youth.config import Settings
from commons_youth.services.storage_base import StorageBackend

logger = logging.getLogger(__name__)


class MinIOStorageBackend(StorageBackend):
    """Storage backend using MinIO/S3 with a public-read uploads prefix."""

    PUBLIC_PREFIX = "covers/"

    def __init__(self, settings: Settings):
        self.client = Minio(
            settings.MINIO_ENDPOINT,
            access_key=settings.MINIO_ACCESS_KEY,
            secret_key=settings.MINIO_SECRET_KEY,
            secure=settings.MINIO_SECURE,
        )
        self.bucket = settings.MINIO_BUCKET
        self.public_endpoint = settings.MINIO_PUBLIC_ENDPOINT or settings.MINIO_ENDPOINT
        self.protocol = "https" if settings.MINIO_SECURE else "http"
        self._ensure_bucket()

    def _ensure_bucket(self):
        """Ensure the bucket exists and cover images are publicly readable."""
        try:
            if not self.client.bucket_exists(self.bucket):
                self.client.make_bucket(self.bucket)
                policy = {
                    "Version": "2012-10-17",
                    "Statement": [
                        {
                            "Effect": "Allow",
                            "Principal": {"AWS": ["*"]},
                            "Action": ["s3:GetObject"],
                            "Resource": [f"arn:aws:s3:::{self.bucket}/{self.PUBLIC_PREFIX}*"],
                        }
                    ],
                }
                self.client.set_bucket_policy(self.bucket, json.dumps(policy))
        except S3Error as e:
            logger.error(f"Error ensuring bucket: {e}")

    def upload_bytes(
        self,
        data: bytes,
        object_name: str,
        content_type: Optional[str] = None,
    ) -> str:
        self.client.put_object(
            self.bucket,
            object_name,
            io.BytesIO(data),
            len(data),
            content_type=content_type or "application/octet-stream",
        )
        return object_name

    def get_public_url(self, object_name: str) -> str:
        return f"{self.protocol}://{self.public_endpoint}/{self.bucket}/{object_name}"

    def delete_object(self, object_name: str) -> None:
        self.client.remove_object(self.bucket, object_name)

    def object_exists(self, object_name: str) -> bool:
        try:
            self.client.stat_object(self.bucket, object_name)
            return True
        except S3Error:
            return False
