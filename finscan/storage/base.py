from abc import ABC, abstractmethod

from finscan.storage.models import StoredFile


class BaseStorage(ABC):
    """Contract for all blob storage adapters."""

    @abstractmethod
    def put(self, data: bytes, folder: str, filename: str, content_type: str) -> StoredFile:
        """Store a blob.

        Args:
            data: Raw file content.
            folder: Logical folder the blob is grouped under.
            filename: Original file name; only its extension is kept.
            content_type: MIME type of the content.

        Returns:
            StoredFile with the identifier used for deletion and the retrieval URL.

        Raises:
            StorageError: if the blob cannot be written.
        """

    @abstractmethod
    def delete(self, file_id: str, resource_kind: str) -> None:
        """Remove a blob by identifier.

        Raises:
            StorageError: if the blob cannot be removed.
        """
