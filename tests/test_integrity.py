"""Tests for envelope integrity reports."""

import pytest

from provn.crypto import load_private_key, public_key_bytes
from provn.envelope import to_envelope, to_json
from provn.integrity import verify_envelope_integrity
from provn.schema import Claim, SignedClaim
from provn.signing import sign_claim

SEED_A = bytes(32)
SEED_B = b"\x01" * 32


@pytest.fixture
def signed():
    return sign_claim(Claim.from_payload(b"quarterly report", timestamp=1700000000), SEED_A)


class TestVerifyEnvelopeIntegrity:
    def test_valid_dict(self, signed):
        result = verify_envelope_integrity(to_envelope(signed))
        assert result.ok
        assert result.signature_valid is True
        assert result.tamper_detected is False
        assert result.decoded == signed

    def test_valid_json_text(self, signed):
        assert verify_envelope_integrity(to_json(signed)).ok

    def test_expected_key_matches(self, signed):
        result = verify_envelope_integrity(to_envelope(signed), expected_public_key=signed.signer)
        assert result.ok

    def test_expected_key_object(self, signed):
        pk = load_private_key(SEED_A).public_key()
        assert verify_envelope_integrity(to_envelope(signed), expected_public_key=pk).ok

    def test_self_signed_forgery_caught_by_expected_key(self, signed):
        """An attacker re-signs an edited claim with their own key."""
        forged_claim = Claim.from_payload(b"quarterly report (edited)", timestamp=1700000000)
        forged = sign_claim(forged_claim, SEED_B)
        result = verify_envelope_integrity(to_envelope(forged), expected_public_key=signed.signer)
        assert result.signature_valid is True
        assert result.signer_matches is False
        assert result.tamper_detected is True
        assert not result.ok

    def test_bad_expected_key_reported(self, signed):
        result = verify_envelope_integrity(to_envelope(signed), expected_public_key=b"\x00" * 5)
        assert result.signer_matches is False
        assert result.errors

    def test_invalid_signature(self, signed):
        env = to_envelope(signed)
        env["claim"]["timestamp"] += 1
        result = verify_envelope_integrity(env)
        assert result.decoded is not None
        assert result.signature_valid is False
        assert result.tamper_detected is True
        assert result.errors == []

    def test_decode_error_reported(self):
        result = verify_envelope_integrity("{not json")
        assert result.decoded is None
        assert result.tamper_detected is True
        assert result.errors and result.errors[0].startswith("decode:")

    def test_truncated_signature_reported(self, signed):
        env = to_envelope(signed)
        env["signature"] = env["signature"][:-2]
        result = verify_envelope_integrity(env)
        assert result.decoded is None
        assert not result.ok

    def test_unrelated_signer(self, signed):
        other = public_key_bytes(load_private_key(SEED_B))
        swapped = SignedClaim(claim=signed.claim, signature=signed.signature, signer=other)
        result = verify_envelope_integrity(to_envelope(swapped))
        assert result.signature_valid is False

    def test_deeply_nested_json_reported(self):
        result = verify_envelope_integrity("[" * 200_000 + "]" * 200_000)
        assert result.decoded is None
        assert result.errors[0].startswith("decode:")

    def test_unencodable_claim_reported_at_decode(self, signed):
        env = to_envelope(signed)
        env["claim"]["timestamp"] = 2**64 - 1
        result = verify_envelope_integrity(env)
        assert result.decoded is None
        assert result.tamper_detected is True

    def test_oversized_claim_verifies(self):
        claim = Claim.from_payload(b"large", timestamp=1, metadata="z" * 6000)
        signed = sign_claim(claim, SEED_A, max_size=10_000)
        assert verify_envelope_integrity(to_json(signed)).ok
