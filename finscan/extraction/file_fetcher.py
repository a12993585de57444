from pathlib import Path
from urllib.parse import unquote, urlparse

import httpx

from finscan.extraction.exceptions import FileFetchError


class FileFetcher:
    """Reads stored file bytes back from a ``file://`` or ``http(s)://`` URL."""

    def __init__(self, timeout_seconds: int = 30, max_bytes: int | None = None) -> None:
        self._timeout_seconds = timeout_seconds
        self._max_bytes = max_bytes

    def fetch(self, url: str) -> bytes:
        """Return the file content.

        Raises:
            FileFetchError: if the URL scheme is unsupported or the read fails.
        """
        scheme = urlparse(url).scheme.lower()
        if scheme == "file":
            data = self._read_local(url)
        elif scheme in ("http", "https"):
            data = self._download(url)
        else:
            raise FileFetchError(f"Unsupported file URL scheme '{scheme}'")

        if self._max_bytes is not None and len(data) > self._max_bytes:
            raise FileFetchError(f"File at {url} exceeds {self._max_bytes} bytes")
        return data

    @staticmethod
    def _read_local(url: str) -> bytes:
        path = Path(unquote(urlparse(url).path))
        try:
            return path.read_bytes()
        except OSError as exc:
            raise FileFetchError(f"Failed to read {path}: {exc}") from exc

    def _download(self, url: str) -> bytes:
        try:
            response = httpx.get(url, timeout=self._timeout_seconds, follow_redirects=True)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise FileFetchError(f"Failed to download {url}: {exc}") from exc
        return response.content
