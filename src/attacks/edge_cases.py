from dataclasses import dataclass
from typing import List

from ..dsa_ref.keys import SigningKey
from ..dsa_ref.models import RecoveryResult, Signature, SigningResult, VerificationResult
from .nonce_reuse import recover_key_from_reused_nonce

LARGE_MESSAGE_LENGTH = 15000


@dataclass(frozen=True)
class NonceReuseDemo:
    first: SigningResult
    second: SigningResult
    recovery: RecoveryResult
    original_private_key: int

    @property
    def attack_succeeded(self):
        return self.recovery.recovered and self.recovery.private_key == self.original_private_key


@dataclass(frozen=True)
class InvalidSignatureCase:
    description: str
    signature: Signature
    verification: VerificationResult

    @property
    def rejected(self):
        return not self.verification.valid


@dataclass(frozen=True)
class LargeMessageDemo:
    length: int
    signing: SigningResult
    verification: VerificationResult


def demonstrate_nonce_reuse(message1, message2, nonce, params, key_pair):
    """Sign both messages with one fixed nonce, then recover the key."""
    sk = SigningKey.from_key_pair(params, key_pair)
    first = sk.sign(message1, nonce=nonce)
    second = sk.sign(message2, nonce=nonce)
    recovery = recover_key_from_reused_nonce(
        message1, first.signature, message2, second.signature, params)
    return NonceReuseDemo(first, second, recovery, key_pair.private_key)


def demonstrate_invalid_signatures(message, params, key_pair, rng=None) -> List[InvalidSignatureCase]:
    sk = SigningKey.from_key_pair(params, key_pair)
    r, s = sk.sign(message, rng=rng).signature
    q = params.q

    cases = [
        ("r = 0", Signature(0, s)),
        ("s = 0", Signature(r, 0)),
        ("r = q (out of range)", Signature(q, s)),
        ("s = q (out of range)", Signature(r, q)),
        ("tampered r", Signature(r % (q - 1) + 1, s)),
        ("tampered s", Signature(r, s % (q - 1) + 1)),
    ]
    return [
        InvalidSignatureCase(description, sig, sk.verifying_key.verify(message, sig))
        for description, sig in cases
    ]


def demonstrate_large_message(params, key_pair, length=LARGE_MESSAGE_LENGTH, rng=None):
    message = "A" * length + " This is a very large message for testing DSS with big inputs."
    sk = SigningKey.from_key_pair(params, key_pair)
    signing = sk.sign(message, rng=rng)
    return LargeMessageDemo(len(message), signing, sk.verifying_key.verify(message, signing.signature))
