"""
provn Attack Harness: tamper transformations over SignedClaim envelopes.

  T1: signature bit flip
  T2: public key bit flip
  T3: key substitution (unrelated public key)
  T4: timestamp bump
  T5: digest edit
  T6: metadata injection

Every attack returns a modified deep copy; none re-signs. A verifier must
report each of them as not valid (``False`` or a decode error), never as
valid.
"""

from __future__ import annotations

import copy


def flip_bit(data: bytes, bit_index: int) -> bytes:
    """Return *data* with bit *bit_index* inverted (bit 0 = MSB of byte 0)."""
    if not 0 <= bit_index < len(data) * 8:
        raise IndexError(f"bit index {bit_index} out of range for {len(data)} bytes")
    buf = bytearray(data)
    buf[bit_index // 8] ^= 0x80 >> (bit_index % 8)
    return bytes(buf)


def _flip_hex_bit(value: str, bit_index: int) -> str:
    return flip_bit(bytes.fromhex(value), bit_index).hex()


def t1_signature_flip(envelope: dict, bit_index: int = 0) -> dict:
    """T1: flip one bit of the signature."""
    tampered = copy.deepcopy(envelope)
    tampered["signature"] = _flip_hex_bit(tampered["signature"], bit_index)
    return tampered


def t2_public_key_flip(envelope: dict, bit_index: int = 0) -> dict:
    """T2: flip one bit of the embedded public key."""
    tampered = copy.deepcopy(envelope)
    tampered["public_key"] = _flip_hex_bit(tampered["public_key"], bit_index)
    return tampered


# Public key for the seed 0x01 * 32; unrelated to any test signer
UNRELATED_PUBLIC_KEY = "8a88e3dd7409f195fd52db2d3cba5d72ca6709bf1d94121bf3748801b40f6f5c"


def t3_key_substitution(envelope: dict, public_key_hex: str = UNRELATED_PUBLIC_KEY) -> dict:
    """T3: claim the signature came from somebody else's key."""
    tampered = copy.deepcopy(envelope)
    if tampered["public_key"] == public_key_hex:
        return t2_public_key_flip(tampered, bit_index=255)
    tampered["public_key"] = public_key_hex
    return tampered


def t4_timestamp_bump(envelope: dict, delta: int = 1) -> dict:
    """T4: move the claim in time."""
    tampered = copy.deepcopy(envelope)
    tampered["claim"]["timestamp"] = tampered["claim"]["timestamp"] + delta
    return tampered


def t5_digest_edit(envelope: dict) -> dict:
    """T5: swap the last hex digit of the digest for a different one."""
    tampered = copy.deepcopy(envelope)
    data = tampered["claim"]["data"]
    last = data[-1]
    tampered["claim"]["data"] = data[:-1] + ("0" if last != "0" else "1")
    return tampered


def t6_metadata_injection(envelope: dict, text: str = "approved by auditor") -> dict:
    """T6: attach (or replace) metadata after signing."""
    tampered = copy.deepcopy(envelope)
    if tampered["claim"].get("metadata") == text:
        text = text + "!"
    tampered["claim"]["metadata"] = text
    return tampered


# ---------------------------------------------------------------------------
# Attack registry
# ---------------------------------------------------------------------------

ATTACKS = {
    "T1_signature_flip": lambda e: t1_signature_flip(e),
    "T1_signature_flip_last": lambda e: t1_signature_flip(e, bit_index=511),
    "T2_public_key_flip": lambda e: t2_public_key_flip(e),
    "T3_key_substitution": lambda e: t3_key_substitution(e),
    "T4_timestamp_bump": lambda e: t4_timestamp_bump(e),
    "T4_timestamp_rewind": lambda e: t4_timestamp_bump(e, delta=-1),
    "T5_digest_edit": lambda e: t5_digest_edit(e),
    "T6_metadata_injection": lambda e: t6_metadata_injection(e),
}


def run_all_attacks(envelope: dict) -> dict[str, dict]:
    """Run all attacks and return {attack_name: tampered_envelope}."""
    return {name: attack_fn(envelope) for name, attack_fn in ATTACKS.items()}
