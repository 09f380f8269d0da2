"""
Test suite for key generation, signing and verification
"""

import hashlib
import random
from dataclasses import FrozenInstanceError

import pytest

from src.dsa_ref.errors import GenerationExhausted, InvalidNonce, InvalidParameters
from src.dsa_ref.keys import KeyPair, SigningKey, VerifyingKey, generate_key_pair
from src.dsa_ref.models import NonceMode, Signature
from src.dsa_ref.params import DomainParameters, generate_parameters

from conftest import ScriptedRng


class TestKeyPair:
    """x in [1, q-1], y = g^x mod p"""

    def test_toy_public_key(self, toy_params):
        assert KeyPair.from_private_key(toy_params, 5).public_key == 12

    def test_generated_key_pair(self, toy_params, rng):
        for _ in range(50):
            kp = generate_key_pair(toy_params, rng)
            assert 0 < kp.private_key < toy_params.q
            assert kp.public_key == pow(toy_params.g, kp.private_key, toy_params.p)

    def test_all_private_keys_reachable(self, toy_params, rng):
        seen = {generate_key_pair(toy_params, rng).private_key for _ in range(500)}
        assert seen == set(range(1, 11))

    def test_rejects_tiny_q(self):
        with pytest.raises(InvalidParameters):
            generate_key_pair(DomainParameters(5, 2, 4))

    @pytest.mark.parametrize("x", [0, 11, -1])
    def test_private_key_out_of_range(self, toy_params, x):
        with pytest.raises(InvalidParameters):
            KeyPair.from_private_key(toy_params, x)
        with pytest.raises(InvalidParameters):
            SigningKey(toy_params, x)

    def test_signing_key_exposes_key_pair(self, toy_params):
        sk = SigningKey(toy_params, 5)
        assert sk.key_pair == KeyPair(5, 12)
        assert sk.verifying_key.pubkey == 12


class TestToyVector:
    """p = 23, q = 11, g = 4, x = 5, k = 3"""

    def test_fixed_nonce_signature(self, toy_params):
        result = SigningKey(toy_params, 5).sign("hello", nonce=3)
        assert result.signature == Signature(7, 2)
        assert result.nonce == 3
        assert result.nonce_mode is NonceMode.FIXED
        assert result.digest == hashlib.sha256(b"hello").hexdigest()
        assert result.steps.hash_int == 4
        assert result.steps.nonce_inverse == 4
        assert (result.steps.r, result.steps.s) == (7, 2)

    def test_verifies_for_same_message(self, toy_params):
        outcome = VerifyingKey(toy_params, 12).verify("hello", (7, 2))
        assert outcome.valid
        assert bool(outcome)
        assert (outcome.steps.w, outcome.steps.u1, outcome.steps.u2, outcome.steps.v) == (6, 2, 9, 7)
        assert outcome.steps.r == 7
        assert "valid" in outcome.reason

    def test_rejects_different_message(self, toy_params):
        outcome = VerifyingKey(toy_params, 12).verify("abc", (7, 2))
        assert not outcome.valid
        assert (outcome.steps.w, outcome.steps.u1, outcome.steps.u2, outcome.steps.v) == (6, 9, 9, 6)
        assert "does not match" in outcome.reason


class TestSigning:
    """Nonce handling and degenerate r / s"""

    @pytest.mark.parametrize("k", [0, 11, 12, -3])
    def test_fixed_nonce_out_of_range(self, toy_params, k):
        with pytest.raises(InvalidNonce):
            SigningKey(toy_params, 5).sign("hello", nonce=k)

    def test_fixed_mode_requires_nonce(self, toy_params):
        with pytest.raises(InvalidNonce):
            SigningKey(toy_params, 5).sign("hello", nonce_mode="fixed")

    @pytest.mark.parametrize("mode", ["random", "deterministic"])
    def test_nonce_with_generated_mode(self, toy_params, mode):
        with pytest.raises(InvalidNonce):
            SigningKey(toy_params, 5).sign("hello", nonce_mode=mode, nonce=3)

    def test_unknown_mode(self, toy_params):
        with pytest.raises(ValueError):
            SigningKey(toy_params, 5).sign("hello", nonce_mode="sometimes")

    def test_fixed_nonce_with_zero_s_fails(self, toy_params):
        # H("msg-15") = 9 (mod 11), so s = 3^-1 (9 + 5*7) = 0
        with pytest.raises(InvalidNonce, match="s = 0"):
            SigningKey(toy_params, 5).sign("msg-15", nonce=3)

    def test_fixed_nonce_with_zero_r_fails(self, degenerate_params):
        with pytest.raises(InvalidNonce, match="r = 0"):
            SigningKey(degenerate_params, 3).sign("degenerate r", nonce=14)

    def test_random_nonce_retries_after_zero_r(self, degenerate_params):
        result = SigningKey(degenerate_params, 3).sign("retry", rng=ScriptedRng(14, 14, 5))
        assert result.nonce == 5
        assert result.signature == Signature(21, 23)
        assert VerifyingKey(degenerate_params, 5).verify("retry", result.signature).valid

    def test_random_nonce_exhaustion(self, degenerate_params):
        with pytest.raises(GenerationExhausted):
            SigningKey(degenerate_params, 3).sign("retry", rng=ScriptedRng(14), attempts=10)

    def test_never_returns_zero_components(self, toy_params, rng):
        sk = SigningKey(toy_params, 5)
        for i in range(300):
            r, s = sk.sign(f"message {i}", rng=rng).signature
            assert 0 < r < 11
            assert 0 < s < 11

    def test_deterministic_nonce(self, toy_params):
        sk = SigningKey(toy_params, 5)
        first = sk.sign("hello", nonce_mode="deterministic")
        second = sk.sign("hello", nonce_mode=NonceMode.DETERMINISTIC)
        assert first == second
        assert first.nonce_mode is NonceMode.DETERMINISTIC
        assert sk.verifying_key.verify("hello", first.signature).valid

    def test_signing_result_is_immutable(self, toy_params):
        result = SigningKey(toy_params, 5).sign("hello", nonce=3)
        with pytest.raises(FrozenInstanceError):
            result.nonce = 4


class TestSignVerifyRoundTrip:
    """sign-then-verify on generated and standard parameters"""

    def test_generated_parameters(self, rng):
        params = generate_parameters(rng=rng)
        for _ in range(5):
            sk = SigningKey.generate(params, rng)
            for message in ["", "hello", "Hello World", "x" * 10000, "ünïcödé ✓"]:
                result = sk.sign(message, rng=rng)
                assert sk.verifying_key.verify(message, result.signature).valid

    def test_standard_parameters_all_modes(self, std_params, std_key_pair):
        sk = SigningKey.from_key_pair(std_params, std_key_pair)
        for mode in NonceMode:
            nonce = 0xC0FFEE if mode is NonceMode.FIXED else None
            result = sk.sign("standard params", nonce_mode=mode, nonce=nonce)
            assert sk.verifying_key.verify("standard params", result.signature).valid

    def test_wrong_public_key_rejected(self, std_params, std_key_pair):
        sk = SigningKey.from_key_pair(std_params, std_key_pair)
        other = SigningKey(std_params, 0xABCDEF)
        sig = sk.sign("message").signature
        assert not other.verifying_key.verify("message", sig).valid

    @pytest.mark.parametrize("bit", [0, 1, 7, 63, 150, 200])
    def test_bit_flip_invalidates(self, std_params, std_key_pair, bit):
        sk = SigningKey.from_key_pair(std_params, std_key_pair)
        r, s = sk.sign("flip me", rng=random.Random(bit)).signature
        assert not sk.verifying_key.verify("flip me", (r ^ (1 << bit), s)).valid
        assert not sk.verifying_key.verify("flip me", (r, s ^ (1 << bit))).valid


class TestVerifyRejections:
    """Malformed signatures give an invalid result, never an exception"""

    @pytest.mark.parametrize("sig", [(0, 2), (7, 0), (11, 2), (7, 11), (-1, 2), (7, 100)])
    def test_out_of_range(self, toy_params, sig):
        outcome = VerifyingKey(toy_params, 12).verify("hello", sig)
        assert not outcome.valid
        assert outcome.reason == "signature values out of range"
        assert (outcome.steps.w, outcome.steps.u1, outcome.steps.u2, outcome.steps.v) == (0, 0, 0, 0)
        assert outcome.steps.r == sig[0]

    def test_non_invertible_s(self):
        # q = 12 is not prime, which only unvalidated parameters allow
        outcome = VerifyingKey(DomainParameters(23, 12, 4), 12).verify("hello", (5, 6))
        assert not outcome.valid
        assert "not invertible" in outcome.reason
