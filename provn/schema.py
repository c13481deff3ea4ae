"""
provn claim schema: Pydantic v2 models.

  Claim        digest + timestamp (+ optional metadata and scalar extensions)
  SignedClaim  Claim + detached Ed25519 signature + signer public key

Digests are lowercase SHA-256 hex. Timestamps are integer UTC seconds.
Both models are frozen: a claim's field set is fixed at construction.

Every value a Claim accepts has a canonical form, so encoding a valid
Claim never fails except on the size bound.
"""

from __future__ import annotations

import hashlib
import math
import re
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .canonicalize import MAX_SAFE_INTEGER
from .hashing import DIGEST_SIZE, hash_payload

_HEX_DIGEST = re.compile(rf"[0-9a-f]{{{DIGEST_SIZE * 2}}}")
_SCALAR_TYPES = (str, int, float, bool)
_SURROGATE = re.compile("[\ud800-\udfff]")


def _now_seconds() -> int:
    return int(datetime.now(timezone.utc).timestamp())


def _check_encodable(name: str, value: Any) -> None:
    """Raise ValueError if *value* has no canonical JSON form."""
    if isinstance(value, bool):
        return
    if isinstance(value, int):
        if abs(value) > MAX_SAFE_INTEGER:
            raise ValueError(f"{name} is outside the range ±(2^53-1)")
    elif isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"{name} must be a finite number")
    elif isinstance(value, str):
        if _SURROGATE.search(value):
            raise ValueError(f"{name} contains a lone surrogate")


class Claim(BaseModel):
    """Assertion that a digest existed at a given time."""

    model_config = ConfigDict(frozen=True, extra="allow")

    data: str  # SHA-256 hex of the payload
    timestamp: int = Field(ge=0, le=MAX_SAFE_INTEGER, strict=True)
    metadata: Optional[str] = Field(default=None, strict=True)

    @field_validator("data", mode="before")
    @classmethod
    def _normalize_digest(cls, v: Any) -> str:
        if isinstance(v, (bytes, bytearray)):
            v = bytes(v).hex()
        if not isinstance(v, str):
            raise ValueError("data must be a hex digest")
        v = v.lower()
        if not _HEX_DIGEST.fullmatch(v):
            raise ValueError(f"data must be {DIGEST_SIZE * 2} hex characters")
        return v

    @field_validator("metadata")
    @classmethod
    def _check_metadata(cls, v: Optional[str]) -> Optional[str]:
        if v is not None:
            _check_encodable("metadata", v)
        return v

    @model_validator(mode="after")
    def _check_extensions(self) -> "Claim":
        for name, value in (self.model_extra or {}).items():
            if not name:
                raise ValueError("extension field names must be non-empty")
            _check_encodable("extension field name", name)
            if not isinstance(value, _SCALAR_TYPES):
                raise ValueError(
                    f"extension field {name!r} must be a str, int, float or bool"
                )
            _check_encodable(f"extension field {name!r}", value)
        return self

    @classmethod
    def new(cls, digest: bytes | str, timestamp: int | None = None, **fields: Any) -> "Claim":
        """Create a claim from an existing digest (default time: now, UTC)."""
        if timestamp is None:
            timestamp = _now_seconds()
        return cls(data=digest, timestamp=timestamp, **fields)

    @classmethod
    def from_payload(
        cls,
        payload: bytes,
        timestamp: int | None = None,
        **fields: Any,
    ) -> "Claim":
        """Hash *payload* and claim it at *timestamp* (default: now, UTC)."""
        return cls.new(hash_payload(payload), timestamp, **fields)

    @property
    def digest_bytes(self) -> bytes:
        return bytes.fromhex(self.data)

    @property
    def extensions(self) -> dict[str, Any]:
        return dict(self.model_extra or {})

    def to_canonical_dict(self) -> dict[str, Any]:
        """Field mapping fed to the canonical encoder (unset optionals dropped)."""
        return self.model_dump(mode="python", exclude_none=True)


class SignedClaim(BaseModel):
    """Claim + detached Ed25519 signature over its JCS bytes.

    Holding a SignedClaim says nothing about its validity; call
    ``verify_claim`` every time.
    """

    model_config = ConfigDict(frozen=True)

    claim: Claim
    signature: bytes = Field(strict=True)
    signer: bytes = Field(strict=True)  # raw 32-byte Ed25519 public key

    @property
    def signature_hex(self) -> str:
        return self.signature.hex()

    @property
    def signer_hex(self) -> str:
        return self.signer.hex()

    @property
    def key_id(self) -> str:
        """Short display identifier of the signer key."""
        return hashlib.sha256(self.signer).hexdigest()[:16]
