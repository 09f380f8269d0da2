import os
from dataclasses import dataclass, fields

# Toy sizes: q ~ 16 bits, p ~ 20-26 bits. Real DSA uses 160-256 bit q.
Q_BITS = 16
MIN_P = 1 << 16
MAX_MULTIPLIER = 1000

MILLER_RABIN_ROUNDS = 5
PRIME_ATTEMPTS = 1000
PARAMETER_ATTEMPTS = 1000
GENERATOR_ATTEMPTS = 100
SIGNING_ATTEMPTS = 100

ENV_PREFIX = "DSS_"


@dataclass(frozen=True)
class DSSConfig:
    q_bits: int = Q_BITS
    min_p: int = MIN_P
    max_multiplier: int = MAX_MULTIPLIER
    rounds: int = MILLER_RABIN_ROUNDS
    prime_attempts: int = PRIME_ATTEMPTS
    parameter_attempts: int = PARAMETER_ATTEMPTS
    generator_attempts: int = GENERATOR_ATTEMPTS
    signing_attempts: int = SIGNING_ATTEMPTS

    def __post_init__(self):
        if self.q_bits < 3:
            raise ValueError("q_bits must be at least 3")
        if self.max_multiplier < 2:
            raise ValueError("max_multiplier must be at least 2")
        for f in fields(self):
            if getattr(self, f.name) <= 0:
                raise ValueError(f"{f.name} must be positive")

    @classmethod
    def from_env(cls, environ=None):
        """
        Build a config from DSS_* variables, e.g. DSS_Q_BITS=20.
        Unset variables keep their defaults.
        """
        environ = os.environ if environ is None else environ
        overrides = {}
        for f in fields(cls):
            raw = environ.get(ENV_PREFIX + f.name.upper())
            if raw is None:
                continue
            try:
                overrides[f.name] = int(raw)
            except ValueError:
                raise ValueError(f"{ENV_PREFIX}{f.name.upper()} must be an integer, got {raw!r}") from None
        return cls(**overrides)


DEFAULT_CONFIG = DSSConfig()
