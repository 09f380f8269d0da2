from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple, Optional


class NonceMode(str, Enum):
    RANDOM = "random"
    FIXED = "fixed"
    DETERMINISTIC = "deterministic"  # RFC 6979


class Signature(NamedTuple):
    r: int
    s: int

    def is_well_formed(self, q):
        return 0 < self.r < q and 0 < self.s < q


@dataclass(frozen=True)
class SigningSteps:
    hash_int: int  # H(m) mod q
    nonce_inverse: int  # k^-1 mod q
    r: int
    s: int


@dataclass(frozen=True)
class SigningResult:
    signature: Signature
    digest: str  # hex SHA-256 of the message
    nonce: int
    nonce_mode: NonceMode
    steps: SigningSteps


@dataclass(frozen=True)
class VerificationSteps:
    w: int
    u1: int
    u2: int
    v: int
    r: int


@dataclass(frozen=True)
class VerificationResult:
    valid: bool
    steps: VerificationSteps
    reason: str

    def __bool__(self):
        return self.valid


@dataclass(frozen=True)
class RecoveryResult:
    recovered: bool
    private_key: Optional[int] = None
    nonce: Optional[int] = None
    reason: str = ""
