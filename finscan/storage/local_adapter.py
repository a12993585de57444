import uuid
from pathlib import Path, PurePosixPath

from finscan.storage.base import BaseStorage
from finscan.storage.exceptions import StorageError
from finscan.storage.models import StoredFile


class LocalStorage(BaseStorage):
    """Stores blobs on the local filesystem under ``{files_root}/{folder}/``.

    The identifier is the path relative to the root. URLs are ``file://`` URIs
    unless a public base URL is configured (e.g. a static file server).
    """

    def __init__(self, files_root: Path, public_base_url: str = "") -> None:
        self._files_root = files_root
        self._public_base_url = public_base_url.rstrip("/")

    def put(self, data: bytes, folder: str, filename: str, content_type: str) -> StoredFile:
        _ = content_type
        file_id = str(PurePosixPath(folder) / f"{uuid.uuid4().hex}{_extension(filename)}")
        path = self._resolve_path(file_id)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as exc:
            raise StorageError(f"Failed to write {file_id}: {exc}") from exc
        return StoredFile(id=file_id, url=self._url_for(file_id, path), size=len(data))

    def delete(self, file_id: str, resource_kind: str) -> None:
        _ = resource_kind
        path = self._resolve_path(file_id)
        try:
            path.unlink()
        except OSError as exc:
            raise StorageError(f"Failed to delete {file_id}: {exc}") from exc

    def _resolve_path(self, file_id: str) -> Path:
        root = self._files_root.resolve()
        path = (root / file_id).resolve()
        if not path.is_relative_to(root):
            raise StorageError(f"File id '{file_id}' escapes the storage root")
        return path

    def _url_for(self, file_id: str, path: Path) -> str:
        if self._public_base_url:
            return f"{self._public_base_url}/{file_id}"
        return path.as_uri()


def _extension(filename: str) -> str:
    return PurePosixPath(filename).suffix.lower()
