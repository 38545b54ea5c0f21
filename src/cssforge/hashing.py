"""Stable string hashing used for style identity."""
import hashlib

HASH_LENGTH = 8


def hash_string(text: str) -> str:
    """Return a fixed-width hex fingerprint of ``text``.

    The digest only depends on the input, so ids generated while rendering on a
    server match the ones computed again when the page is hydrated.
    """
    return hashlib.md5(text.encode("utf-8")).hexdigest()[:HASH_LENGTH]
