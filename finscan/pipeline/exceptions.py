class PipelineError(Exception):
    """Base exception for all pipeline-related errors."""


class DocumentNotFoundError(PipelineError):
    """Raised when a document cannot be found for the requesting user."""


class PipelineCancelledError(PipelineError):
    """Raised between stages when the pipeline has been asked to stop."""


class SubmissionError(PipelineError):
    """Raised when an upload is rejected before any background work starts."""


class EmptyFileError(SubmissionError):
    """Raised when the uploaded file has no content."""


class UnsupportedFileTypeError(SubmissionError):
    """Raised when the uploaded file is not an accepted image or document type."""


class FileTooLargeError(SubmissionError):
    """Raised when the uploaded file exceeds the configured size limit."""
