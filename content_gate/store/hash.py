"""Stable hashing for persisted record keys."""

import hashlib


def compute_url_hash(url: str) -> str:
    """Compute a deterministic identifier for a URL.

    Python's built-in ``hash`` is salted per process, so keys derived
    from it would not survive a restart. The digest is taken over the
    exact URL string, without canonicalization.

    Args:
        url: URL string.

    Returns:
        First 16 characters of the SHA-256 hex digest.

    Examples:
        >>> len(compute_url_hash("https://example.com/landing"))
        16
    """
    return hashlib.sha256(url.encode("utf-8")).hexdigest()[:16]
