"""URI helpers for base-URI resolution of ``$id`` and ``$ref`` values."""

from __future__ import annotations

from urllib.parse import unquote, urldefrag, urljoin, urlsplit


def split_fragment(uri: str) -> tuple[str, str]:
    """Split *uri* into ``(url_without_fragment, fragment)``."""
    url, fragment = urldefrag(uri)
    return url, fragment


def strip_fragment(uri: str) -> str:
    return split_fragment(uri)[0]


def normalize_uri(uri: str) -> str:
    """Drop an empty trailing fragment (``foo#`` and ``foo`` name the same resource)."""
    return uri[:-1] if uri.endswith("#") else uri


def is_absolute(uri: str) -> bool:
    return bool(urlsplit(uri).scheme)


def resolve_uri(base: str | None, reference: str) -> str:
    """Resolve *reference* against *base*.

    Fragment-only references are appended to the base directly, which also
    covers non-hierarchical bases such as ``urn:uuid:...`` that ``urljoin``
    refuses to combine.
    """
    if not base or is_absolute(reference):
        return normalize_uri(reference)
    if reference.startswith("#"):
        return normalize_uri(strip_fragment(base) + reference)
    return normalize_uri(urljoin(base, reference))


def decode_fragment(fragment: str) -> str:
    """Percent-decode a URI fragment before it is read as a JSON Pointer."""
    return unquote(fragment)
