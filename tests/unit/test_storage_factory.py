from pathlib import Path
from unittest.mock import patch

import pytest

from finscan.config.settings import Settings
from finscan.storage.factory import StorageFactory
from finscan.storage.local_adapter import LocalStorage
from finscan.storage.models import resource_kind_for


def _settings(**overrides: object) -> Settings:
    return Settings(_env_file=None, **overrides)


class TestStorageFactory:
    def test_creates_local_storage(self, tmp_path: Path) -> None:
        storage = StorageFactory.create(
            _settings(storage_backend="local", storage_local_root=str(tmp_path))
        )
        assert isinstance(storage, LocalStorage)

    def test_creates_s3_storage(self) -> None:
        settings = _settings(
            storage_backend="S3",
            s3_bucket="finscan",
            s3_endpoint="http://minio:9000",
            storage_timeout_seconds=12,
        )
        with patch("finscan.storage.factory.S3Storage") as mock_s3:
            StorageFactory.create(settings)
        kwargs = mock_s3.call_args.kwargs
        assert kwargs["bucket"] == "finscan"
        assert kwargs["endpoint_url"] == "http://minio:9000"
        assert kwargs["timeout_seconds"] == 12

    def test_s3_requires_bucket(self) -> None:
        with pytest.raises(ValueError, match="s3_bucket"):
            StorageFactory.create(_settings(storage_backend="s3", s3_bucket=""))

    def test_raises_for_unknown_backend(self) -> None:
        with pytest.raises(ValueError, match="Unknown storage backend"):
            StorageFactory.create(_settings(storage_backend="ftp"))


class TestResourceKind:
    @pytest.mark.parametrize(
        ("content_type", "expected"),
        [("application/pdf", "raw"), ("image/png", "image"), ("IMAGE/JPEG", "image")],
    )
    def test_resource_kind(self, content_type: str, expected: str) -> None:
        assert resource_kind_for(content_type) == expected
