"""
Envelope integrity checks for tooling.

Wraps decode + verify into a single report so that callers such as the CLI
can show every problem instead of stopping at the first exception.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from .crypto import PublicKeyLike, public_key_bytes
from .envelope import from_envelope, from_json
from .errors import ProvnError
from .schema import SignedClaim
from .signing import verify_claim

logger = logging.getLogger(__name__)


@dataclass
class VerificationResult:
    """Result of checking a (possibly tampered) envelope."""
    decoded: Optional[SignedClaim] = None
    signature_valid: bool = False
    signer_matches: bool = True
    errors: list[str] = field(default_factory=list)

    @property
    def tamper_detected(self) -> bool:
        return not (self.signature_valid and self.signer_matches)

    @property
    def ok(self) -> bool:
        return not self.tamper_detected and not self.errors


def verify_envelope_integrity(
    envelope: dict[str, Any] | str | bytes,
    expected_public_key: PublicKeyLike | None = None,
) -> VerificationResult:
    """
    Decode an envelope and verify its signature.

    If *expected_public_key* is given, the embedded signer must equal it;
    otherwise an attacker could re-sign a modified claim with their own key.

    Never raises ProvnError; problems are collected in ``errors``.
    """
    result = VerificationResult()

    try:
        if isinstance(envelope, dict):
            signed = from_envelope(envelope)
        else:
            signed = from_json(envelope)
    except ProvnError as e:
        result.errors.append(f"decode: {e}")
        return result
    result.decoded = signed

    if expected_public_key is not None:
        try:
            expected = public_key_bytes(expected_public_key)
        except ProvnError as e:
            result.errors.append(f"expected key: {e}")
            result.signer_matches = False
        else:
            if expected != signed.signer:
                result.signer_matches = False
                result.errors.append(
                    f"signer mismatch: envelope key {signed.signer_hex[:16]}..., "
                    f"expected {expected.hex()[:16]}..."
                )

    try:
        result.signature_valid = verify_claim(signed)
    except ProvnError as e:
        result.errors.append(f"verify: {e}")
        result.signature_valid = False

    if result.tamper_detected:
        logger.info(f"Tamper detected for claim {signed.claim.data[:16]}...")
    return result
