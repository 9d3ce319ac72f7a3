"""
All classes and methods which have to do with hierarchical deterministic keys
"""
# wallet/__init__.py
from hdkeys.wallet.derivation import *
from hdkeys.wallet.networks import *
from hdkeys.wallet.xkeys import *
