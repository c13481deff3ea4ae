"""
Error taxonomy for provn.

Every failure in the core is local and synchronous. A signature that does
not verify is NOT an error: ``verify`` returns ``False`` for it. Errors are
reserved for inputs that cannot be processed at all.

  EncodingError      value has no canonical form (NaN, lone surrogate, ...)
    SizeExceeded     canonical bytes exceed the configured bound
  SigningError       private key material is malformed
  VerificationError  signature or public key is malformed
  DecodingError      interchange representation is malformed
"""

from __future__ import annotations

from typing import Any


class ErrorCodes:
    """Stable machine-readable error codes."""
    ENCODING_ERROR = "ENCODING_ERROR"
    SIZE_EXCEEDED = "SIZE_EXCEEDED"
    SIGNING_ERROR = "SIGNING_ERROR"
    VERIFICATION_ERROR = "VERIFICATION_ERROR"
    DECODING_ERROR = "DECODING_ERROR"


class ProvnError(Exception):
    """Base exception for all provn errors."""

    default_code = "PROVN_ERROR"

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.details = details or {}

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class EncodingError(ProvnError, ValueError):
    """A value cannot be represented in canonical form."""
    default_code = ErrorCodes.ENCODING_ERROR


class SizeExceeded(EncodingError):
    """Canonical encoding is larger than the allowed bound."""
    default_code = ErrorCodes.SIZE_EXCEEDED

    def __init__(self, size: int, limit: int) -> None:
        super().__init__(
            f"canonical encoding is {size} bytes, limit is {limit}",
            details={"size": size, "limit": limit},
        )
        self.size = size
        self.limit = limit


class SigningError(ProvnError):
    """Private key material is malformed."""
    default_code = ErrorCodes.SIGNING_ERROR


class VerificationError(ProvnError):
    """Signature or public key is malformed (not merely invalid)."""
    default_code = ErrorCodes.VERIFICATION_ERROR


class DecodingError(ProvnError, ValueError):
    """Interchange representation of a SignedClaim is malformed."""
    default_code = ErrorCodes.DECODING_ERROR
