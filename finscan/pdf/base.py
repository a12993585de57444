from abc import ABC, abstractmethod


class BasePdfExtractor(ABC):
    """Contract for all PDF text extraction adapters."""

    def __init__(self, max_pages: int = 20) -> None:
        self._max_pages = max_pages

    @abstractmethod
    def extract(self, pdf_bytes: bytes) -> str:
        """Extract plain text from the first ``max_pages`` pages of a PDF.

        Raises:
            PdfExtractionError: if extraction fails for any reason.
        """
