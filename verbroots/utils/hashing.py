"""Content hashing for fetched source payloads."""

import hashlib


HASH_PREFIX = "blake2b"


def hash_bytes(data: bytes) -> str:
    """
    Hash a raw source payload with BLAKE2b (32-byte digest).

    Args:
        data: Bytes to hash

    Returns:
        Hash string in format "blake2b:hexdigest"
    """
    h = hashlib.blake2b(data, digest_size=32)
    return f"{HASH_PREFIX}:{h.hexdigest()}"
