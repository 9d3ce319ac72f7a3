"""
Fixtures used in the tests
"""
import pytest

from hdkeys.cryptography import SECP256K1, DEFAULT_PROVIDER
from hdkeys.wallet import ExtendedPrivKey

# BIP32 test vector 1
VECTOR1_SEED = bytes.fromhex("000102030405060708090a0b0c0d0e0f")


@pytest.fixture()
def curve():
    return SECP256K1


@pytest.fixture()
def provider():
    return DEFAULT_PROVIDER


@pytest.fixture(scope="session")
def master_key():
    return ExtendedPrivKey.derive(VECTOR1_SEED)
