"""provn: deterministic claim canonicalization and Ed25519 signing."""

from .errors import (
    DecodingError,
    EncodingError,
    ProvnError,
    SigningError,
    SizeExceeded,
    VerificationError,
)
from .config import DEFAULT_CONFIG, ProvnConfig
from .hashing import DIGEST_SIZE, StreamingHasher, hash_file, hash_hex, hash_payload
from .canonicalize import canonicalize, canonicalize_json
from .schema import Claim, SignedClaim
from .crypto import key_id, load_private_key, load_public_key, public_key_hex, sign, verify
from .signing import encode_claim, sign_claim, verify_claim
from .envelope import from_envelope, from_json, to_envelope, to_json
from .integrity import VerificationResult, verify_envelope_integrity

__version__ = "0.1.0"

__all__ = [
    "DecodingError",
    "EncodingError",
    "ProvnError",
    "SigningError",
    "SizeExceeded",
    "VerificationError",
    "DEFAULT_CONFIG",
    "ProvnConfig",
    "DIGEST_SIZE",
    "StreamingHasher",
    "hash_file",
    "hash_hex",
    "hash_payload",
    "canonicalize",
    "canonicalize_json",
    "Claim",
    "SignedClaim",
    "key_id",
    "load_private_key",
    "load_public_key",
    "public_key_hex",
    "sign",
    "verify",
    "encode_claim",
    "sign_claim",
    "verify_claim",
    "from_envelope",
    "from_json",
    "to_envelope",
    "to_json",
    "VerificationResult",
    "verify_envelope_integrity",
]
