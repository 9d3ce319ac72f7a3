"""
The BIP32 standard formats
"""
from typing import Final

__all__ = ["ECC", "XKEYS", "BUFFERS", "LOGGING"]


class ECC:
    """
    Byte sizes of secp256k1 keys
    """
    COORD_BYTES: Final[int] = 32
    PRIVKEY_BYTES: Final[int] = 32
    COMPRESSED_BYTES: Final[int] = 33
    UNCOMPRESSED_BYTES: Final[int] = 65


class XKEYS:
    """
    Constants related to the extended public and private keys
    """
    SEED_KEY: Final[bytes] = b'Bitcoin seed'
    MIN_SEED_BYTES: Final[int] = 16  # 128 bits
    MAX_SEED_BYTES: Final[int] = 64  # 512 bits

    # Field sizes
    VERSION: Final[int] = 4
    DEPTH: Final[int] = 1
    FINGERPRINT: Final[int] = 4
    CHILD_NUMBER: Final[int] = 4
    CHAIN_LENGTH: Final[int] = 32
    KEY_DATA: Final[int] = 33
    CHECKSUM: Final[int] = 4
    PAYLOAD_BYTES: Final[int] = 78
    SERIAL_BYTES: Final[int] = 82

    MAX_DEPTH: Final[int] = 255

    # Version bytes for different key types
    MAINNET_PRIVATE: Final[bytes] = bytes.fromhex("0488ade4")
    MAINNET_PUBLIC: Final[bytes] = bytes.fromhex("0488b21e")
    TESTNET_PRIVATE: Final[bytes] = bytes.fromhex("04358394")
    TESTNET_PUBLIC: Final[bytes] = bytes.fromhex("043587cf")
    BIP49_XPRV: Final[bytes] = bytes.fromhex("049d7878")
    BIP49_XPUB: Final[bytes] = bytes.fromhex("049d7cb2")
    BIP84_XPRV: Final[bytes] = bytes.fromhex("04b2430c")
    BIP84_XPUB: Final[bytes] = bytes.fromhex("04b24746")

    # Hardened derivation threshold
    HARDENED_OFFSET: Final[int] = 0x80000000
    MAX_INDEX: Final[int] = 0xffffffff


class BUFFERS:
    """
    Capacities of the fixed-size buffers used during derivation and serialization
    """
    SCRATCH: Final[int] = 128
    PAYLOAD: Final[int] = 128
    TEXT: Final[int] = 256


class LOGGING:
    DEFAULT_LEVEL: Final[str] = "WARNING"
    FORMAT: Final[str] = '%(asctime)s [%(name)s] [%(levelname)s]: %(message)s'
