from abc import ABC, abstractmethod

from finscan.extraction.models import ExtractionResult


class BaseExtractionProvider(ABC):
    """Contract for all extraction providers."""

    name: str = ""

    @abstractmethod
    def extract(self, file_url: str, content_type: str) -> ExtractionResult:
        """Read a stored document and return its transaction fields.

        Args:
            file_url: Retrieval URL returned by the storage adapter.
            content_type: MIME type recorded at upload time.

        Raises:
            ExtractionError: on any failure.
        """
