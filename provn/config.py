"""Runtime configuration for provn."""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_MAX_ENCODED_SIZE = 4096      # bytes of canonical claim JSON
DEFAULT_HASH_CHUNK_SIZE = 64 * 1024  # bytes read per streaming step


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


@dataclass(frozen=True)
class ProvnConfig:
    """
    Limits applied by the encoder and the hasher.

    ``max_encoded_size`` bounds the canonical bytes of a single claim so
    that claims stay small enough for downstream batching. Exceeding it is
    an error, never a truncation.
    """
    max_encoded_size: int = DEFAULT_MAX_ENCODED_SIZE
    hash_chunk_size: int = DEFAULT_HASH_CHUNK_SIZE

    def __post_init__(self):
        if self.max_encoded_size <= 0:
            raise ValueError("max_encoded_size must be positive")
        if self.hash_chunk_size <= 0:
            raise ValueError("hash_chunk_size must be positive")

    @classmethod
    def from_env(cls) -> "ProvnConfig":
        """Build a config from PROVN_* environment variables."""
        return cls(
            max_encoded_size=_env_int("PROVN_MAX_CLAIM_BYTES", DEFAULT_MAX_ENCODED_SIZE),
            hash_chunk_size=_env_int("PROVN_HASH_CHUNK_SIZE", DEFAULT_HASH_CHUNK_SIZE),
        )


DEFAULT_CONFIG = ProvnConfig()
