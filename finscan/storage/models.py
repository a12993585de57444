from dataclasses import dataclass


@dataclass(frozen=True)
class StoredFile:
    """Result of a successful put: opaque identifier, durable URL and byte size."""

    id: str
    url: str
    size: int


def resource_kind_for(content_type: str) -> str:
    """Storage resource kind hint: ``raw`` for application/* types, ``image`` otherwise."""
    return "raw" if content_type.lower().startswith("application/") else "image"
