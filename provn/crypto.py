"""
Ed25519 signing and verification (RFC 8032) over canonical claim bytes.

Key material is always passed in explicitly; nothing here keeps keys
between calls. Malformed keys or signatures raise typed errors, while a
well-formed signature that does not match returns False.
"""

from __future__ import annotations

import hashlib

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat

from .errors import SigningError, VerificationError

PRIVATE_KEY_SIZE = 32
PUBLIC_KEY_SIZE = 32
SIGNATURE_SIZE = 64

PrivateKeyLike = Ed25519PrivateKey | bytes
PublicKeyLike = Ed25519PublicKey | bytes


# ---------------------------------------------------------------------------
# Key loading
# ---------------------------------------------------------------------------

def load_private_key(key: PrivateKeyLike) -> Ed25519PrivateKey:
    """Accept a key object or a raw 32-byte seed."""
    if isinstance(key, Ed25519PrivateKey):
        return key
    if not isinstance(key, (bytes, bytearray)):
        raise SigningError(f"private key must be bytes, got {type(key).__name__}")
    if len(key) != PRIVATE_KEY_SIZE:
        raise SigningError(
            f"private key must be {PRIVATE_KEY_SIZE} bytes, got {len(key)}",
            details={"length": len(key)},
        )
    return Ed25519PrivateKey.from_private_bytes(bytes(key))


def load_public_key(key: PublicKeyLike) -> Ed25519PublicKey:
    """Accept a key object or raw 32 bytes."""
    if isinstance(key, Ed25519PublicKey):
        return key
    if not isinstance(key, (bytes, bytearray)):
        raise VerificationError(f"public key must be bytes, got {type(key).__name__}")
    if len(key) != PUBLIC_KEY_SIZE:
        raise VerificationError(
            f"public key must be {PUBLIC_KEY_SIZE} bytes, got {len(key)}",
            details={"length": len(key)},
        )
    try:
        return Ed25519PublicKey.from_public_bytes(bytes(key))
    except ValueError as e:
        raise VerificationError(f"invalid public key: {e}") from e


def public_key_bytes(key: PublicKeyLike | Ed25519PrivateKey) -> bytes:
    """Raw public key bytes; a private key yields its public half."""
    if isinstance(key, Ed25519PrivateKey):
        key = key.public_key()
    return load_public_key(key).public_bytes(Encoding.Raw, PublicFormat.Raw)


def public_key_hex(key: PublicKeyLike | Ed25519PrivateKey) -> str:
    return public_key_bytes(key).hex()


def key_id(key: PublicKeyLike) -> str:
    """Key identifier: truncated SHA-256 hex of the raw public key."""
    return hashlib.sha256(public_key_bytes(key)).hexdigest()[:16]


# ---------------------------------------------------------------------------
# Signing & verification
# ---------------------------------------------------------------------------

def sign(data: bytes, private_key: PrivateKeyLike) -> bytes:
    """Sign raw bytes with Ed25519. Returns 64-byte signature."""
    sk = load_private_key(private_key)
    return sk.sign(bytes(data))


def verify(data: bytes, signature: bytes, public_key: PublicKeyLike) -> bool:
    """Verify an Ed25519 signature. Returns True if valid, False otherwise.

    Raises VerificationError if the signature or key is malformed.
    """
    if not isinstance(signature, (bytes, bytearray)):
        raise VerificationError(f"signature must be bytes, got {type(signature).__name__}")
    if len(signature) != SIGNATURE_SIZE:
        raise VerificationError(
            f"signature must be {SIGNATURE_SIZE} bytes, got {len(signature)}",
            details={"length": len(signature)},
        )
    pk = load_public_key(public_key)
    try:
        pk.verify(bytes(signature), bytes(data))
        return True
    except InvalidSignature:
        return False
