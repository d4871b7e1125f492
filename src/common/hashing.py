"""Hashing utilities."""

import hashlib


def sha256_hex(value: str) -> str:
    """Return the SHA-256 hex digest of a UTF-8 string."""
    return hashlib.sha256(value.encode("utf-8")).hexdigest()


def generate_item_key(normalized_url: str) -> str:
    """Generate the deduplication key for an item from its normalized URL."""
    return sha256_hex(normalized_url)


def content_fingerprint(item_ids: list[str], risk_level: str) -> str:
    """Fingerprint the exact input set of a summary: sorted item ids plus risk level."""
    return sha256_hex(",".join(sorted(item_ids)) + ":" + risk_level)
