import random

import pytest

from src.dsa_ref.keys import KeyPair
from src.dsa_ref.params import DomainParameters

# 1024-bit p / 224-bit q produced by `openssl dsaparam 1024`
STD_P = int(
    "cf6fe67774120bd49cfed96044c06133ce24c28d38c0d7ba42184de593a3722c"
    "a0bfcfa8ed0ca11ea18f62d168f5aa145caf1ba8215178120d44db9fe5e55948"
    "4889a4e30aeb78912878bd9dfbc3cdb47b823f40361c90abf69f264770fa3738"
    "4c6e56374507e6e48827a2519a320830c857e318f84dfd7c15f4de10db5e6c19", 16)
STD_Q = int("cabf56ac299abfd34748453fb96d109fc1d31079e6fb258421ae8c59", 16)
STD_G = int(
    "7f89866cddad1846cac9f8b74c577c9fa0c9cf78fa21e3be401c7d888faeccc6"
    "d196e3c4aa73cd73689e48a2541aa947a218b62e28a2ad4d4687a3e04a511ab2"
    "eb2a642f8915c153422437136b2f2a37f09ed06a4c64ade3a2ed671869ce184e"
    "a799d0b5921a848c8468e0ad02a3299a43f51184c7eb383ba8213141f3fc82ea", 16)


class ScriptedRng:
    """randrange() returns queued values in order, then repeats the last one."""

    def __init__(self, *values):
        self.values = list(values)

    def randrange(self, start, stop=None):
        if len(self.values) > 1:
            return self.values.pop(0)
        return self.values[0]


class LowestRng:
    def randrange(self, start, stop=None):
        return 0 if stop is None else start


class HighestRng:
    def randrange(self, start, stop=None):
        return start - 1 if stop is None else stop - 1


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def toy_params():
    """p = 23, q = 11, g = 4; 4 has order 11 mod 23."""
    return DomainParameters(23, 11, 4)


@pytest.fixture
def toy_key_pair(toy_params):
    return KeyPair.from_private_key(toy_params, 5)


@pytest.fixture
def degenerate_params():
    """p = 59, q = 29, g = 4; 4^14 = 29 (mod 59), so k = 14 gives r = 0."""
    return DomainParameters(59, 29, 4)


@pytest.fixture(scope="session")
def std_params():
    return DomainParameters(STD_P, STD_Q, STD_G)


@pytest.fixture(scope="session")
def std_key_pair(std_params):
    return KeyPair.from_private_key(std_params, 0x1F2E3D4C5B6A79880123456789ABCDEF0FEDCBA9876543210ABCDE)
