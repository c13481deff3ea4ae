"""Tests for tamper attack harness. Attacks must be detected."""

import pytest

from attacks.tamper import (
    ATTACKS,
    UNRELATED_PUBLIC_KEY,
    flip_bit,
    run_all_attacks,
    t1_signature_flip,
    t2_public_key_flip,
    t3_key_substitution,
    t4_timestamp_bump,
    t5_digest_edit,
    t6_metadata_injection,
)
from provn.envelope import to_envelope
from provn.integrity import verify_envelope_integrity
from provn.schema import Claim
from provn.signing import sign_claim


@pytest.fixture
def envelope():
    claim = Claim.from_payload(b"AI Model v1.0 Accuracy: 98.42%", timestamp=1700000000)
    return to_envelope(sign_claim(claim, bytes(32)))


class TestFlipBit:
    def test_msb_first(self):
        assert flip_bit(b"\x00\x00", 0) == b"\x80\x00"
        assert flip_bit(b"\x00\x00", 15) == b"\x00\x01"

    def test_involution(self):
        data = b"claim bytes"
        for i in range(len(data) * 8):
            flipped = flip_bit(data, i)
            assert flipped != data
            assert flip_bit(flipped, i) == data

    @pytest.mark.parametrize("index", [-1, 16])
    def test_out_of_range(self, index):
        with pytest.raises(IndexError):
            flip_bit(b"\x00\x00", index)


class TestAttacks:
    def test_original_is_valid(self, envelope):
        assert verify_envelope_integrity(envelope).ok

    def test_attacks_do_not_mutate_input(self, envelope):
        snapshot = repr(envelope)
        run_all_attacks(envelope)
        assert repr(envelope) == snapshot

    def test_every_attack_changes_envelope(self, envelope):
        for name, tampered in run_all_attacks(envelope).items():
            assert tampered != envelope, name

    @pytest.mark.parametrize("name", sorted(ATTACKS))
    def test_every_attack_detected(self, envelope, name):
        result = verify_envelope_integrity(ATTACKS[name](envelope))
        assert result.tamper_detected is True
        assert result.signature_valid is False

    def test_signature_flip_is_invalid_not_malformed(self, envelope):
        result = verify_envelope_integrity(t1_signature_flip(envelope, bit_index=100))
        assert result.decoded is not None
        assert result.errors == []

    def test_public_key_flip(self, envelope):
        tampered = t2_public_key_flip(envelope, bit_index=7)
        assert tampered["public_key"] != envelope["public_key"]
        assert verify_envelope_integrity(tampered).signature_valid is False

    def test_key_substitution(self, envelope):
        assert t3_key_substitution(envelope)["public_key"] == UNRELATED_PUBLIC_KEY

    def test_key_substitution_when_already_unrelated(self, envelope):
        env = dict(envelope, public_key=UNRELATED_PUBLIC_KEY)
        assert t3_key_substitution(env)["public_key"] != UNRELATED_PUBLIC_KEY

    def test_timestamp_bump(self, envelope):
        assert t4_timestamp_bump(envelope)["claim"]["timestamp"] == 1700000001

    def test_digest_edit(self, envelope):
        tampered = t5_digest_edit(envelope)
        assert tampered["claim"]["data"][:-1] == envelope["claim"]["data"][:-1]
        assert tampered["claim"]["data"] != envelope["claim"]["data"]

    def test_metadata_injection(self, envelope):
        tampered = t6_metadata_injection(envelope)
        assert tampered["claim"]["metadata"] == "approved by auditor"
        again = t6_metadata_injection(tampered)
        assert again["claim"]["metadata"] != tampered["claim"]["metadata"]
