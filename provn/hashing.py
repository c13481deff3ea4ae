"""
Content hashing for claims.

- SHA-256 digests of in-memory payloads
- Streaming digests over file objects and paths (memory bounded by chunk size)
"""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import BinaryIO

from .config import DEFAULT_CONFIG

DIGEST_SIZE = 32
HASH_ALGORITHM = "sha256"


def hash_payload(payload: bytes) -> bytes:
    """Return the 32-byte SHA-256 digest of *payload*."""
    if not isinstance(payload, (bytes, bytearray, memoryview)):
        raise TypeError(f"payload must be bytes, got {type(payload).__name__}")
    return hashlib.sha256(payload).digest()


def hash_hex(payload: str | bytes) -> str:
    """Return the SHA-256 hex digest of *payload* (str is UTF-8 encoded)."""
    if isinstance(payload, str):
        payload = payload.encode("utf-8")
    return hash_payload(payload).hex()


class StreamingHasher:
    """Incremental SHA-256 over chunks of a payload."""

    def __init__(self):
        self._h = hashlib.sha256()
        self.bytes_hashed = 0

    def update(self, chunk: bytes) -> "StreamingHasher":
        self._h.update(chunk)
        self.bytes_hashed += len(chunk)
        return self

    def digest(self) -> bytes:
        return self._h.digest()

    def hexdigest(self) -> str:
        return self._h.hexdigest()


def hash_stream(stream: BinaryIO, chunk_size: int | None = None) -> bytes:
    """Digest a binary stream without reading it fully into memory."""
    size = chunk_size or DEFAULT_CONFIG.hash_chunk_size
    hasher = StreamingHasher()
    while True:
        chunk = stream.read(size)
        if not chunk:
            break
        hasher.update(chunk)
    return hasher.digest()


def hash_file(path: str | Path, chunk_size: int | None = None) -> bytes:
    with open(path, "rb") as f:
        return hash_stream(f, chunk_size=chunk_size)
