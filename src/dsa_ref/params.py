import logging
from dataclasses import dataclass

from .config import DEFAULT_CONFIG, MILLER_RABIN_ROUNDS
from .errors import GenerationExhausted, InvalidParameters
from .numbertheory import default_rng, generate_prime, is_prime, mod_pow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DomainParameters:
    p: int  # prime modulus
    q: int  # prime divisor of p - 1
    g: int  # generator of the order-q subgroup


def validate_parameters(params, rounds=MILLER_RABIN_ROUNDS, rng=None):
    p, q, g = params.p, params.q, params.g
    if q <= 2:
        raise InvalidParameters("q must be greater than 2")
    if not is_prime(q, rounds, rng):
        raise InvalidParameters(f"q = {q} is not prime")
    if not is_prime(p, rounds, rng):
        raise InvalidParameters(f"p = {p} is not prime")
    if (p - 1) % q != 0:
        raise InvalidParameters("q does not divide p - 1")
    if not 1 < g < p:
        raise InvalidParameters("g must satisfy 1 < g < p")
    # q is prime and g != 1, so g^q = 1 pins the order to exactly q
    if mod_pow(g, q, p) != 1:
        raise InvalidParameters("g does not generate the order-q subgroup")
    return params


def _find_modulus(q, config, rng):
    # p = k*q + 1 is odd only for even k
    k_min = max(2, -(-(config.min_p - 1) // q))
    k_min += k_min % 2
    if k_min > config.max_multiplier:
        raise InvalidParameters(
            f"no multiplier <= {config.max_multiplier} lifts q = {q} above p >= {config.min_p}")

    slots = (config.max_multiplier - k_min) // 2 + 1
    for attempt in range(1, config.parameter_attempts + 1):
        k = k_min + 2 * rng.randrange(slots)
        p = k * q + 1
        if is_prime(p, config.rounds, rng):
            logger.debug("p = %d * q + 1 is prime (attempt %d)", k, attempt)
            return p

    raise GenerationExhausted(
        f"no prime p = k*q + 1 found in {config.parameter_attempts} attempts")


def _find_generator(p, q, config, rng):
    exponent = (p - 1) // q
    for _ in range(config.generator_attempts):
        h = rng.randrange(2, p - 1)
        g = mod_pow(h, exponent, p)
        if g != 1:
            return g

    raise GenerationExhausted(f"no generator found in {config.generator_attempts} attempts")


def generate_parameters(config=None, rng=None):
    """
    Build (p, q, g): a q_bits-bit prime q, a prime p = k*q + 1 over random
    even multipliers k, and g = h^((p-1)/q) mod p for a random h with g != 1.
    Every search is bounded; exhaustion raises GenerationExhausted.
    """
    config = DEFAULT_CONFIG if config is None else config
    rng = default_rng(rng)

    q = generate_prime(config.q_bits, config.prime_attempts, config.rounds, rng)
    p = _find_modulus(q, config, rng)
    g = _find_generator(p, q, config, rng)

    params = DomainParameters(p, q, g)
    logger.info("generated domain parameters p=%d (%d bits) q=%d (%d bits)",
                p, p.bit_length(), q, q.bit_length())
    return params
