"""
SignedClaim interchange format.

    {
      "claim":      {"data": "<sha256 hex>", "timestamp": 1700000000, ...},
      "public_key": "<64 hex chars, raw Ed25519 public key>",
      "signature":  "<128 hex chars, Ed25519 signature>"
    }

Decoding is all-or-nothing: any malformed part raises DecodingError.
Hex on the wire is lowercase only, so each SignedClaim has exactly one
envelope.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from pydantic import ValidationError

from .canonicalize import canonicalize_json
from .crypto import PUBLIC_KEY_SIZE, SIGNATURE_SIZE
from .errors import DecodingError
from .schema import Claim, SignedClaim

logger = logging.getLogger(__name__)

ENVELOPE_KEYS = frozenset({"claim", "public_key", "signature"})


def to_envelope(signed: SignedClaim) -> dict[str, Any]:
    return {
        "claim": signed.claim.to_canonical_dict(),
        "public_key": signed.signer_hex,
        "signature": signed.signature_hex,
    }


def to_json(signed: SignedClaim, indent: int | None = None) -> str:
    """Serialize a SignedClaim; the compact form is JCS canonical."""
    envelope = to_envelope(signed)
    if indent is None:
        return canonicalize_json(envelope)
    return json.dumps(envelope, indent=indent, sort_keys=True, ensure_ascii=False)


def _decode_hex(value: Any, field: str, size: int) -> bytes:
    if not isinstance(value, str):
        raise DecodingError(f"{field} must be a hex string", details={"field": field})
    try:
        raw = bytes.fromhex(value)
    except ValueError as e:
        raise DecodingError(f"{field} is not valid hex: {e}", details={"field": field}) from e
    # fromhex skips whitespace; the wire format has none
    if len(value) != 2 * len(raw):
        raise DecodingError(f"{field} contains non-hex characters", details={"field": field})
    if value != value.lower():
        raise DecodingError(f"{field} must be lowercase hex", details={"field": field})
    if len(raw) != size:
        raise DecodingError(
            f"{field} must decode to {size} bytes, got {len(raw)}",
            details={"field": field, "length": len(raw)},
        )
    return raw


def from_envelope(data: Any) -> SignedClaim:
    """Decode an envelope dict into a SignedClaim."""
    if not isinstance(data, dict):
        raise DecodingError(f"envelope must be an object, got {type(data).__name__}")

    keys = set(data)
    if keys != ENVELOPE_KEYS:
        missing = sorted(ENVELOPE_KEYS - keys)
        unexpected = sorted(keys - ENVELOPE_KEYS)
        raise DecodingError(
            f"envelope keys mismatch (missing={missing}, unexpected={unexpected})",
            details={"missing": missing, "unexpected": unexpected},
        )

    claim_data = data["claim"]
    if not isinstance(claim_data, dict):
        raise DecodingError("claim must be an object")
    digest = claim_data.get("data")
    if isinstance(digest, str) and digest != digest.lower():
        raise DecodingError("claim data must be lowercase hex", details={"field": "data"})
    try:
        claim = Claim.model_validate(claim_data)
    except ValidationError as e:
        raise DecodingError(f"invalid claim: {e.error_count()} validation error(s)",
                            details={"errors": e.errors(include_url=False)}) from e

    signer = _decode_hex(data["public_key"], "public_key", PUBLIC_KEY_SIZE)
    signature = _decode_hex(data["signature"], "signature", SIGNATURE_SIZE)
    return SignedClaim(claim=claim, signature=signature, signer=signer)


def _reject_constant(name: str):
    raise DecodingError(f"non-finite number {name} is not allowed")


def _reject_duplicates(pairs: list[tuple[str, Any]]) -> dict[str, Any]:
    obj: dict[str, Any] = {}
    for key, value in pairs:
        if key in obj:
            raise DecodingError(f"duplicate key {key!r}", details={"key": key})
        obj[key] = value
    return obj


def from_json(text: str | bytes) -> SignedClaim:
    """Parse and decode a JSON envelope."""
    try:
        data = json.loads(
            text,
            parse_constant=_reject_constant,
            object_pairs_hook=_reject_duplicates,
        )
    except (json.JSONDecodeError, UnicodeDecodeError, RecursionError) as e:
        logger.debug(f"Rejected envelope: {e}")
        raise DecodingError(f"envelope is not valid JSON: {e}") from e
    return from_envelope(data)
