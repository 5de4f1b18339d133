"""Fast hashing for document fingerprints and store file names."""

import xxhash


def hash_bytes(data: bytes, truncate: int | None = None) -> str:
    """
    Hash bytes to an xxhash64 hex digest.

    Args:
        data: Bytes to hash
        truncate: Optional length to truncate the digest (e.g., 16 for file names)

    Returns:
        Hex digest string
    """
    digest = xxhash.xxh64(data).hexdigest()
    return digest[:truncate] if truncate else digest


def hash_string(text: str, truncate: int | None = None) -> str:
    """Hash a string by its UTF-8 bytes."""
    return hash_bytes(text.encode("utf-8"), truncate)


__all__ = ["hash_string", "hash_bytes"]
