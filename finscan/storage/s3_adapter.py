import uuid
from pathlib import PurePosixPath
from typing import Any

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from finscan.logging.logger import Log
from finscan.storage.base import BaseStorage
from finscan.storage.exceptions import StorageError
from finscan.storage.models import StoredFile


class S3Storage(BaseStorage):
    """Stores blobs in an S3-compatible bucket."""

    def __init__(
        self,
        *,
        bucket: str,
        endpoint_url: str | None,
        access_key: str,
        secret_key: str,
        region: str,
        timeout_seconds: int,
        public_base_url: str = "",
        client: Any = None,
    ) -> None:
        self._bucket = bucket
        self._region = region
        self._endpoint_url = (endpoint_url or "").rstrip("/")
        self._public_base_url = public_base_url.rstrip("/")
        self._client = client or boto3.client(
            "s3",
            endpoint_url=endpoint_url or None,
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
            region_name=region,
            config=Config(
                signature_version="s3v4",
                connect_timeout=timeout_seconds,
                read_timeout=timeout_seconds,
                retries={"max_attempts": 2},
            ),
        )

    def put(self, data: bytes, folder: str, filename: str, content_type: str) -> StoredFile:
        suffix = PurePosixPath(filename).suffix.lower()
        key = str(PurePosixPath(folder) / f"{uuid.uuid4().hex}{suffix}")
        try:
            self._client.put_object(
                Bucket=self._bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
                ServerSideEncryption="AES256",
            )
        except (BotoCoreError, ClientError) as exc:
            raise StorageError(f"S3 upload of {key} failed: {exc}") from exc
        return StoredFile(id=key, url=self._url_for(key), size=len(data))

    def delete(self, file_id: str, resource_kind: str) -> None:
        Log.debug(f"Deleting {resource_kind} object {file_id} from bucket {self._bucket}")
        try:
            self._client.delete_object(Bucket=self._bucket, Key=file_id)
        except (BotoCoreError, ClientError) as exc:
            raise StorageError(f"S3 delete of {file_id} failed: {exc}") from exc

    def _url_for(self, key: str) -> str:
        if self._public_base_url:
            return f"{self._public_base_url}/{key}"
        if self._endpoint_url:
            return f"{self._endpoint_url}/{self._bucket}/{key}"
        return f"https://{self._bucket}.s3.{self._region}.amazonaws.com/{key}"
