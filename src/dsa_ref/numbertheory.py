import logging
import secrets

from .config import MILLER_RABIN_ROUNDS, PRIME_ATTEMPTS
from .errors import GenerationExhausted, NotInvertible

logger = logging.getLogger(__name__)

_system_rng = secrets.SystemRandom()


def default_rng(rng=None):
    return _system_rng if rng is None else rng


def mod_pow(base, exponent, modulus):
    """base^exponent mod modulus by right-to-left square-and-multiply."""
    if modulus <= 0:
        raise ValueError("modulus must be positive")
    if exponent < 0:
        raise ValueError("exponent must be non-negative")
    if modulus == 1:
        return 0

    result = 1
    base %= modulus
    while exponent > 0:
        if exponent & 1:
            result = (result * base) % modulus
        base = (base * base) % modulus
        exponent >>= 1
    return result


def mod_inverse(a, m):
    """
    Extended Euclid. Returns x in [0, m) with a*x = 1 (mod m), or raises
    NotInvertible when gcd(a, m) != 1.
    """
    if m <= 0:
        raise ValueError("modulus must be positive")

    old_r, r = a % m, m
    old_s, s = 1, 0
    while r:
        quotient = old_r // r
        old_r, r = r, old_r - quotient * r
        old_s, s = s, old_s - quotient * s

    if old_r != 1:
        raise NotInvertible(a, m)
    return old_s % m


def is_prime(n, rounds=MILLER_RABIN_ROUNDS, rng=None):
    """
    Miller-Rabin. A composite survives all rounds with probability at most
    4^-rounds.
    """
    if n == 2 or n == 3:
        return True
    if n < 2 or n % 2 == 0:
        return False

    # n - 1 = 2^r * d with d odd
    r, d = 0, n - 1
    while d % 2 == 0:
        d //= 2
        r += 1

    rng = default_rng(rng)
    for _ in range(rounds):
        a = rng.randrange(2, n - 1)
        x = mod_pow(a, d, n)
        if x == 1 or x == n - 1:
            continue
        for _ in range(r - 1):
            x = mod_pow(x, 2, n)
            if x == n - 1:
                break
        else:
            return False
    return True


def generate_prime(bit_length, attempts=PRIME_ATTEMPTS, rounds=MILLER_RABIN_ROUNDS, rng=None):
    if bit_length < 2:
        raise ValueError("bit_length must be at least 2")

    rng = default_rng(rng)
    low, high = 1 << (bit_length - 1), 1 << bit_length
    for attempt in range(1, attempts + 1):
        candidate = rng.randrange(low, high) | 1
        if is_prime(candidate, rounds, rng):
            logger.debug("found %d-bit prime after %d candidates", bit_length, attempt)
            return candidate

    logger.debug("no %d-bit prime in %d candidates", bit_length, attempts)
    raise GenerationExhausted(f"no {bit_length}-bit prime found in {attempts} attempts")
