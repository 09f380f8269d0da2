"""
Test suite for domain parameter generation and validation
"""

import random
from dataclasses import FrozenInstanceError

import pytest

from src.dsa_ref.config import DSSConfig
from src.dsa_ref.errors import GenerationExhausted, InvalidParameters
from src.dsa_ref.params import (
    DomainParameters, _find_generator, generate_parameters, validate_parameters,
)

from conftest import HighestRng, LowestRng


class TestValidateParameters:
    """Relational invariants of (p, q, g)"""

    def test_toy_parameters_valid(self, toy_params):
        assert validate_parameters(toy_params) is toy_params

    def test_standard_parameters_valid(self, std_params):
        validate_parameters(std_params)

    @pytest.mark.parametrize("p,q,g,fragment", [
        (7, 2, 6, "greater than 2"),
        (23, 9, 4, "q = 9 is not prime"),
        (25, 3, 4, "p = 25 is not prime"),
        (23, 7, 4, "does not divide"),
        (23, 11, 1, "1 < g < p"),
        (23, 11, 23, "1 < g < p"),
        (23, 11, 5, "order-q subgroup"),
    ])
    def test_invalid_parameters(self, p, q, g, fragment):
        with pytest.raises(InvalidParameters, match=fragment):
            validate_parameters(DomainParameters(p, q, g), rounds=20)

    def test_parameters_are_immutable(self, toy_params):
        with pytest.raises(FrozenInstanceError):
            toy_params.p = 29


class TestGenerateParameters:
    """Bounded search for p = k*q + 1 and g"""

    def test_generated_parameters_satisfy_invariants(self, rng):
        params = generate_parameters(rng=rng)
        validate_parameters(params, rounds=20)
        assert params.q.bit_length() == 16
        assert params.p >= 2**16
        assert (params.p - 1) % params.q == 0
        assert pow(params.g, params.q, params.p) == 1
        assert params.g != 1

    def test_seeded_generation_is_reproducible(self):
        assert generate_parameters(rng=random.Random(3)) == generate_parameters(rng=random.Random(3))

    def test_multiplier_is_even_and_bounded(self, rng):
        for _ in range(10):
            params = generate_parameters(rng=rng)
            k = (params.p - 1) // params.q
            assert k % 2 == 0
            assert 2 <= k <= 1000

    def test_custom_q_bits(self, rng):
        params = generate_parameters(DSSConfig(q_bits=24), rng)
        assert params.q.bit_length() == 24
        validate_parameters(params)

    def test_prime_search_exhaustion(self):
        # every q candidate is 2^15 + 1 = 32769 = 3 * 10923
        with pytest.raises(GenerationExhausted):
            generate_parameters(DSSConfig(prime_attempts=3), LowestRng())

    def test_modulus_search_exhaustion(self):
        # q = 7 and the only multiplier allowed is 2, so p = 15 every time
        config = DSSConfig(q_bits=3, min_p=2, max_multiplier=2, parameter_attempts=3)
        with pytest.raises(GenerationExhausted, match="p = k\\*q \\+ 1"):
            generate_parameters(config, HighestRng())

    def test_unreachable_min_p(self):
        config = DSSConfig(q_bits=3, min_p=10**6, max_multiplier=10)
        with pytest.raises(InvalidParameters):
            generate_parameters(config, random.Random(0))

    def test_generator_search_exhaustion(self):
        # 2 has order 5 mod 31, so 2^((31-1)/3) = 1
        with pytest.raises(GenerationExhausted):
            _find_generator(31, 3, DSSConfig(generator_attempts=4), LowestRng())
