class ExtractionError(Exception):
    """Raised when structured fields cannot be extracted from a document."""


class ExtractionValidationError(ExtractionError):
    """Raised when the provider response fails domain validation."""


class FileFetchError(ExtractionError):
    """Raised when the stored file cannot be read back from its URL."""


class UnsupportedContentTypeError(ExtractionError):
    """Raised when the document's content type cannot be sent to the provider."""
