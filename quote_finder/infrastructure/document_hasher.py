# quote_finder/infrastructure/document_hasher.py

import hashlib
import re
from typing import Optional, Union


# Only the head of the content takes part in the identity hash.
CONTENT_PREFIX_LENGTH = 4096

_NON_SLUG = re.compile(r"[^a-z0-9]+")


def compute_content_hash(content: Union[str, bytes], prefix_length: int = CONTENT_PREFIX_LENGTH) -> str:
    """SHA-256 of the first `prefix_length` characters (or bytes) of the content."""
    head = content[:prefix_length]
    if isinstance(head, str):
        head = head.encode("utf-8", errors="ignore")
    return hashlib.sha256(head).hexdigest()


def compute_document_key(
    url: Optional[str],
    title: Optional[str] = None,
    content: Union[str, bytes] = "",
) -> str:
    """
    Stable cache key for a document.

    The URL is used as-is when there is one. Documents without a URL
    (dropped local files, pasted text) are identified by their title plus
    a hash of their opening content.
    """
    if url and url.strip():
        return url.strip()

    slug = _NON_SLUG.sub("-", (title or "untitled").lower()).strip("-") or "untitled"
    return f"local:{slug}:{compute_content_hash(content)[:16]}"
