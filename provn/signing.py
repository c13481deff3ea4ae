"""
Claim signing. Binds a Claim to an Ed25519 signature over its JCS bytes.

Steps (sign):
  1. Canonicalize the claim via JCS (RFC 8785), bounded in size.
  2. Sign the canonical bytes with the caller's private key.
  3. Return a SignedClaim carrying the claim, signature and public key.

Verification re-derives the canonical bytes from the claim every time.
The size bound applies only when producing claims: a correctly signed
claim verifies whatever the local limit.
"""

from __future__ import annotations

import logging

from .canonicalize import canonicalize
from .config import DEFAULT_CONFIG
from .crypto import PrivateKeyLike, load_private_key, public_key_bytes, sign, verify
from .schema import Claim, SignedClaim

logger = logging.getLogger(__name__)


def encode_claim(claim: Claim, max_size: int | None = None) -> bytes:
    """Return the canonical bytes of *claim*.

    Raises EncodingError if a field has no canonical form and SizeExceeded
    if the result is larger than *max_size* (default from config).
    """
    limit = max_size if max_size is not None else DEFAULT_CONFIG.max_encoded_size
    return canonicalize(claim.to_canonical_dict(), max_size=limit)


def sign_claim(
    claim: Claim,
    private_key: PrivateKeyLike,
    max_size: int | None = None,
) -> SignedClaim:
    """Canonicalize and sign *claim*. The key is used only for this call.

    *max_size* overrides the configured bound on the canonical bytes.
    """
    sk = load_private_key(private_key)
    canonical = encode_claim(claim, max_size=max_size)
    signature = sign(canonical, sk)
    signer = public_key_bytes(sk)
    logger.debug(f"Signed claim {claim.data[:16]}... ({len(canonical)} canonical bytes)")
    return SignedClaim(claim=claim, signature=signature, signer=signer)


def verify_claim(signed_claim: SignedClaim) -> bool:
    """Re-encode the claim and check the signature against the embedded signer.

    Returns False for a signature that does not match. Raises
    VerificationError only if the signature or signer is malformed.
    """
    canonical = canonicalize(signed_claim.claim.to_canonical_dict())
    ok = verify(canonical, signed_claim.signature, signed_claim.signer)
    if not ok:
        logger.debug(
            f"Signature mismatch for claim {signed_claim.claim.data[:16]}... "
            f"under key {signed_claim.key_id}"
        )
    return ok
