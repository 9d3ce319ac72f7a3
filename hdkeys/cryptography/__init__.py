"""
Elliptic curve cryptography, hash functions and the crypto provider used by the derivation engine
"""
# cryptography/__init__.py
from hdkeys.cryptography.ecc import *
from hdkeys.cryptography.ecc_keys import *
from hdkeys.cryptography.ecdsa import *
from hdkeys.cryptography.hash_functions import *
from hdkeys.cryptography.provider import *
