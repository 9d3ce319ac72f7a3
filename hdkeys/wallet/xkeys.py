"""
Extended Keys (xprv/xpub) Implementation
Implements BIP32 Hierarchical Deterministic key derivation and the base58check serialization of extended keys

Serialization (82 bytes before base58):
    version (4) || depth (1) || parent fingerprint (4) || child number (4) || chain code (32) || key data (33)
    || checksum (4)
"""
import json
from dataclasses import dataclass, field, replace

from hdkeys.core import BUFFERS, ECC, XKEYS, ByteBuffer, ChecksumMismatchError, DepthExhaustedError, \
    ExtendedKeyError, InvalidKeyMaterialError, MalformedEncodingError, PayloadLengthError, get_logger, \
    get_stream, read_big_int, read_stream
from hdkeys.cryptography.provider import CryptoProvider, DEFAULT_PROVIDER
from hdkeys.data.codec import encode_base58, decode_base58
from hdkeys.wallet.derivation import ChildNumber, DerivationPath
from hdkeys.wallet.networks import MAINNET, Network, lookup_version

__all__ = ["ExtendedPrivKey", "ExtendedPubKey", "decode_extended_key", "decode_with_network"]

logger = get_logger(__name__)

ZERO_FINGERPRINT = b'\x00' * XKEYS.FINGERPRINT


# --- VALIDATION --- #
def _as_bytes(value, length: int, name: str) -> bytes:
    if not isinstance(value, (bytes, bytearray)):
        raise ExtendedKeyError(f"{name} must be bytes, received {type(value).__name__}")
    if len(value) != length:
        raise ExtendedKeyError(f"{name} must be {length} bytes")
    return bytes(value)


def _validate_common(key):
    """
    Checks and normalizes the metadata shared by private and public extended keys
    """
    if isinstance(key.depth, bool) or not isinstance(key.depth, int) or not 0 <= key.depth <= XKEYS.MAX_DEPTH:
        raise ExtendedKeyError(f"Depth must be an integer in [0, {XKEYS.MAX_DEPTH}]")

    child_number = key.child_number
    if isinstance(child_number, int) and not isinstance(child_number, bool):
        child_number = ChildNumber.from_int(child_number)
    if not isinstance(child_number, ChildNumber):
        raise ExtendedKeyError("Child number must be a ChildNumber or 32-bit integer")

    object.__setattr__(key, "child_number", child_number)
    object.__setattr__(key, "parent_fingerprint",
                       _as_bytes(key.parent_fingerprint, XKEYS.FINGERPRINT, "Parent fingerprint"))
    object.__setattr__(key, "chain_code", _as_bytes(key.chain_code, XKEYS.CHAIN_LENGTH, "Chain code"))


# --- SERIALIZATION --- #
def _serialize(version: bytes, key, key_data: bytes) -> bytes:
    buffer = ByteBuffer(BUFFERS.PAYLOAD)
    buffer.extend(version)
    buffer.push(key.depth)
    buffer.extend(key.parent_fingerprint)
    buffer.extend(key.child_number.to_bytes())
    buffer.extend(key.chain_code)
    buffer.extend(key_data)

    checksum = key.provider.hash256(buffer.to_bytes())[:XKEYS.CHECKSUM]
    buffer.extend(checksum)
    return buffer.to_bytes()


def decode_with_network(text: str, provider: CryptoProvider = DEFAULT_PROVIDER):
    """
    Decodes a base58check extended key string. Returns the key (ExtendedPrivKey or ExtendedPubKey, depending on the
    version bytes) together with the Network the version belongs to.
    """
    serialized = decode_base58(text)
    if len(serialized) != XKEYS.SERIAL_BYTES:
        raise PayloadLengthError(f"Extended key must be {XKEYS.SERIAL_BYTES} bytes, decoded {len(serialized)}")

    # Verify checksum before interpreting any field
    payload, checksum = serialized[:-XKEYS.CHECKSUM], serialized[-XKEYS.CHECKSUM:]
    if provider.hash256(payload)[:XKEYS.CHECKSUM] != checksum:
        raise ChecksumMismatchError("Decoding error. Checksum doesn't match serial value")

    stream = get_stream(payload)
    version = read_stream(stream, XKEYS.VERSION, "version")
    network, is_public = lookup_version(version)

    depth = read_big_int(stream, XKEYS.DEPTH, "depth")
    parent_fingerprint = read_stream(stream, XKEYS.FINGERPRINT, "parent_fingerprint")
    child_number = ChildNumber.from_bytes(read_stream(stream, XKEYS.CHILD_NUMBER, "index"))
    chain_code = read_stream(stream, XKEYS.CHAIN_LENGTH, "chain_code")
    key_data = read_stream(stream, XKEYS.KEY_DATA, "key_data")

    if depth == 0 and parent_fingerprint != ZERO_FINGERPRINT:
        raise MalformedEncodingError("Zero depth with non-zero parent fingerprint")
    if depth == 0 and child_number.to_int() != 0:
        raise MalformedEncodingError("Zero depth with non-zero child number")

    if is_public:
        if key_data[0] not in (2, 3) or not provider.is_valid_pubkey(key_data):
            raise InvalidKeyMaterialError("Key data is not a valid compressed public key")
        key = ExtendedPubKey(depth, parent_fingerprint, child_number, key_data, chain_code, provider=provider)
    else:
        if key_data[0] != 0:
            raise InvalidKeyMaterialError("Private key data must begin with a zero byte")
        if not provider.is_valid_scalar(key_data[1:]):
            raise InvalidKeyMaterialError("Private key not in range [1, n-1]")
        key = ExtendedPrivKey(depth, parent_fingerprint, child_number, key_data[1:], chain_code, provider=provider)

    logger.debug("Decoded %s %s key at depth %d", network.name, "public" if is_public else "private", depth)
    return key, network


def decode_extended_key(text: str, provider: CryptoProvider = DEFAULT_PROVIDER):
    """
    Decodes a base58check extended key string into an ExtendedPrivKey or ExtendedPubKey
    """
    key, _ = decode_with_network(text, provider)
    return key


@dataclass(frozen=True)
class ExtendedPrivKey:
    """
    An extended private key: secp256k1 secret scalar, chain code and its position in the derivation tree.
    Immutable; every derivation returns a new key.
    """
    depth: int
    parent_fingerprint: bytes
    child_number: ChildNumber
    secret_key: bytes = field(repr=False)
    chain_code: bytes
    provider: CryptoProvider = field(default=DEFAULT_PROVIDER, repr=False, compare=False)

    def __post_init__(self):
        _validate_common(self)
        object.__setattr__(self, "secret_key", _as_bytes(self.secret_key, ECC.PRIVKEY_BYTES, "Secret key"))

    # --- CONSTRUCTION --- #
    @classmethod
    def derive(cls, seed: bytes, path: DerivationPath | str | None = None,
               provider: CryptoProvider = DEFAULT_PROVIDER) -> "ExtendedPrivKey":
        """
        Creates the master key from the seed, then derives each child along the path
        """
        if not isinstance(seed, (bytes, bytearray)):
            raise ExtendedKeyError(f"Seed must be bytes, received {type(seed).__name__}")
        if not XKEYS.MIN_SEED_BYTES <= len(seed) <= XKEYS.MAX_SEED_BYTES:
            logger.warning("Seed length of %d bytes is outside the recommended range of %d-%d bytes", len(seed),
                           XKEYS.MIN_SEED_BYTES, XKEYS.MAX_SEED_BYTES)

        # 1. Run the HMAC-512
        seed_hash = provider.hmac_sha512(XKEYS.SEED_KEY, bytes(seed))

        # 2. Left half is the private key, right half the chain code
        secret_key, chain_code = seed_hash[:32], seed_hash[32:]
        if not provider.is_valid_scalar(secret_key):
            raise InvalidKeyMaterialError("Master secret key not in range [1, n-1]")

        # 3. Use 0 values for remaining params
        master = cls(0, ZERO_FINGERPRINT, ChildNumber(0), secret_key, chain_code, provider=provider)
        logger.debug("Created master key %s", master.fingerprint().hex())

        return master.derive_path(path) if path is not None else master

    @classmethod
    def decode(cls, text: str, provider: CryptoProvider = DEFAULT_PROVIDER) -> "ExtendedPrivKey":
        key = decode_extended_key(text, provider)
        if not isinstance(key, cls):
            raise MalformedEncodingError("Cannot decode a public extended key as a private key")
        return key

    # --- DERIVATION --- #
    def derive_path(self, path: DerivationPath | str) -> "ExtendedPrivKey":
        """
        Applies each child of the path in order, starting from this key
        """
        if isinstance(path, str):
            path = DerivationPath.parse(path)

        key = self
        for child_number in path:
            key = key.child(child_number)
        return key

    def child(self, child_number: ChildNumber | int) -> "ExtendedPrivKey":
        """
        Derive the child at the given index
        """
        if not isinstance(child_number, ChildNumber):
            child_number = ChildNumber.from_int(child_number)

        if self.depth >= XKEYS.MAX_DEPTH:
            raise DepthExhaustedError(f"Cannot derive beyond depth {XKEYS.MAX_DEPTH}")

        # --- Prepare data for HMAC --- #
        data = ByteBuffer(BUFFERS.SCRATCH)
        if child_number.is_normal:
            data.extend(self.public_key())
        else:
            data.push(0)
            data.extend(self.secret_key)
        data.extend(child_number.to_bytes())

        # --- HMAC SHA512 --- #
        key_hash = self.provider.hmac_sha512(self.chain_code, data.to_bytes())
        tweak, child_chain_code = key_hash[:32], key_hash[32:]

        # No retry on an invalid tweak; scalar_add raises InvalidKeyMaterialError
        child_secret = self.provider.scalar_add(self.secret_key, tweak)

        logger.debug("Derived child %s at depth %d", child_number, self.depth + 1)
        return ExtendedPrivKey(
            depth=self.depth + 1,
            parent_fingerprint=self.fingerprint(),
            child_number=child_number,
            secret_key=child_secret,
            chain_code=child_chain_code,
            provider=self.provider
        )

    # --- KEYS --- #
    def public_key(self) -> bytes:
        """33-byte compressed public key"""
        return self.provider.export_pubkey_compressed(self.secret_key)

    def export_pk(self) -> bytes:
        """65-byte uncompressed public key"""
        return self.provider.export_pubkey_uncompressed(self.secret_key)

    def identifier(self) -> bytes:
        return self.provider.hash160(self.public_key())

    def fingerprint(self) -> bytes:
        """
        First 4 bytes of HASH160 of the compressed public key
        """
        return self.identifier()[:XKEYS.FINGERPRINT]

    def sign(self, message_hash: bytes) -> bytes:
        """DER-encoded ECDSA signature of the message hash"""
        return self.provider.sign(self.secret_key, message_hash)

    def to_public(self) -> "ExtendedPubKey":
        return ExtendedPubKey(
            depth=self.depth,
            parent_fingerprint=self.parent_fingerprint,
            child_number=self.child_number,
            public_key=self.public_key(),
            chain_code=self.chain_code,
            provider=self.provider
        )

    def with_provider(self, provider: CryptoProvider) -> "ExtendedPrivKey":
        return replace(self, provider=provider)

    # --- SERIALIZATION --- #
    def to_bytes(self, is_public: bool = False, network: Network = MAINNET) -> bytes:
        """
        The 82-byte serialization, checksum included
        """
        key_data = self.public_key() if is_public else b'\x00' + self.secret_key
        return _serialize(network.version(is_public), self, key_data)

    def encode(self, is_public: bool = False, network: Network = MAINNET) -> str:
        return encode_base58(self.to_bytes(is_public, network), BUFFERS.TEXT)

    # --- DISPLAY --- #
    def to_dict(self, network: Network = MAINNET) -> dict:
        return {
            "prvkey": self.secret_key.hex(),
            "pubkey": self.public_key().hex(),
            "chain_code": self.chain_code.hex(),
            "depth": self.depth,
            "parent_fingerprint": self.parent_fingerprint.hex(),
            "child_number": str(self.child_number),
            "fingerprint": self.fingerprint().hex(),
            "xprv": self.encode(False, network),
            "xpub": self.encode(True, network),
        }

    def to_json(self, network: Network = MAINNET) -> str:
        return json.dumps(self.to_dict(network), indent=2)


@dataclass(frozen=True)
class ExtendedPubKey:
    """
    The public half of an extended key. Carries the compressed public key in place of the secret scalar.
    """
    depth: int
    parent_fingerprint: bytes
    child_number: ChildNumber
    public_key: bytes
    chain_code: bytes
    provider: CryptoProvider = field(default=DEFAULT_PROVIDER, repr=False, compare=False)

    def __post_init__(self):
        _validate_common(self)
        object.__setattr__(self, "public_key", _as_bytes(self.public_key, ECC.COMPRESSED_BYTES, "Public key"))

    @classmethod
    def decode(cls, text: str, provider: CryptoProvider = DEFAULT_PROVIDER) -> "ExtendedPubKey":
        """
        Decodes an xpub. A private extended key string is accepted and returned as its public half.
        """
        key = decode_extended_key(text, provider)
        return key.to_public() if isinstance(key, ExtendedPrivKey) else key

    def identifier(self) -> bytes:
        return self.provider.hash160(self.public_key)

    def fingerprint(self) -> bytes:
        return self.identifier()[:XKEYS.FINGERPRINT]

    def verify(self, message_hash: bytes, signature: bytes) -> bool:
        return self.provider.verify(self.public_key, message_hash, signature)

    def to_bytes(self, network: Network = MAINNET) -> bytes:
        return _serialize(network.public_version, self, self.public_key)

    def encode(self, network: Network = MAINNET) -> str:
        return encode_base58(self.to_bytes(network), BUFFERS.TEXT)

    def to_dict(self, network: Network = MAINNET) -> dict:
        return {
            "pubkey": self.public_key.hex(),
            "chain_code": self.chain_code.hex(),
            "depth": self.depth,
            "parent_fingerprint": self.parent_fingerprint.hex(),
            "child_number": str(self.child_number),
            "fingerprint": self.fingerprint().hex(),
            "xpub": self.encode(network),
        }

    def to_json(self, network: Network = MAINNET) -> str:
        return json.dumps(self.to_dict(network), indent=2)
