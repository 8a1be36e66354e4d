# quote_finder/infrastructure/document_fetcher.py

import base64
import binascii
import re
from pathlib import Path
from typing import Optional
from urllib.parse import unquote

import requests

from quote_finder.domain.errors import DocumentFetchError


DOWNLOAD_TIMEOUT_SECONDS = 30

_WINDOWS_DRIVE = re.compile(r"^/[A-Za-z]:")


def file_url_to_path(url: str) -> Path:
    """Turn a file:// URL into a local path (handles %-escapes and Windows drives)."""
    raw = url[len("file://"):]
    if _WINDOWS_DRIVE.match(raw):
        raw = raw[1:]
    return Path(unquote(raw))


class DocumentFetcher:
    """Obtains the raw bytes of a document from a URL, a local file or inline base64."""

    def __init__(self, timeout_seconds: float = DOWNLOAD_TIMEOUT_SECONDS, session: Optional[requests.Session] = None):
        self._timeout_seconds = timeout_seconds
        self._session = session or requests.Session()

    def fetch(self, url: str) -> bytes:
        if not url:
            raise ValueError("URL is required.")
        if url.startswith("file://"):
            return self.read_local(file_url_to_path(url))
        if url.startswith(("http://", "https://")):
            return self.download(url)
        raise DocumentFetchError(f"Unsupported URL scheme: {url}")

    def download(self, url: str) -> bytes:
        try:
            response = self._session.get(url, timeout=self._timeout_seconds)
            response.raise_for_status()
        except requests.RequestException as error:
            raise DocumentFetchError(f"Could not download document from URL: {error}") from error
        return response.content

    @staticmethod
    def read_local(path: Path) -> bytes:
        try:
            return Path(path).read_bytes()
        except OSError as error:
            raise DocumentFetchError(f"Could not read local file '{path}': {error}") from error

    @staticmethod
    def decode_inline(data: str) -> bytes:
        """Decode base64 payloads, with or without a data: URL prefix."""
        if data.startswith("data:") and "," in data:
            data = data.split(",", 1)[1]
        try:
            return base64.b64decode(data, validate=True)
        except (binascii.Error, ValueError) as error:
            raise DocumentFetchError(f"Inline document data is not valid base64: {error}") from error
