class StorageError(Exception):
    """Raised when a blob cannot be stored or removed."""
