"""
hdkeys - BIP32 hierarchical deterministic key derivation

Sub-packages:
    -core: constants, exceptions, logging and byte handling
    -cryptography: secp256k1, ECDSA, hash functions and the crypto provider
    -data: base58 and base58check encoding
    -wallet: child numbers, derivation paths, networks and extended keys
"""
# hdkeys/__init__.py
from hdkeys.core.exceptions import *
from hdkeys.wallet import *

__version__ = "0.1.0"
