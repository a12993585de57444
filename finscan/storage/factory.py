from pathlib import Path

from finscan.config.settings import Settings
from finscan.storage.base import BaseStorage
from finscan.storage.local_adapter import LocalStorage
from finscan.storage.s3_adapter import S3Storage


class StorageFactory:
    """Creates the configured storage adapter."""

    BACKENDS = ("local", "s3")

    @classmethod
    def create(cls, settings: Settings) -> BaseStorage:
        backend = settings.storage_backend.lower()
        if backend == "local":
            return LocalStorage(
                files_root=Path(settings.storage_local_root),
                public_base_url=settings.storage_public_base_url,
            )
        if backend == "s3":
            if not settings.s3_bucket:
                raise ValueError("s3_bucket is required for storage_backend=s3")
            return S3Storage(
                bucket=settings.s3_bucket,
                endpoint_url=settings.s3_endpoint or None,
                access_key=settings.s3_access_key,
                secret_key=settings.s3_secret_key,
                region=settings.s3_region,
                timeout_seconds=settings.storage_timeout_seconds,
                public_base_url=settings.storage_public_base_url,
            )
        raise ValueError(
            f"Unknown storage backend '{backend}'. Choose from: {list(cls.BACKENDS)}"
        )
