class ScoringError(Exception):
    """Raised when a transaction cannot be scored."""


class ScoringValidationError(ScoringError):
    """Raised when the scorer's verdict fails domain validation."""
