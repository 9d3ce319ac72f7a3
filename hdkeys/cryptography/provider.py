"""
The CryptoProvider interface - every hash and curve operation the key derivation engine needs, behind one seam.

Secp256k1Provider is the default implementation, built on hashlib/hmac, the ripemd package and the pure-Python
secp256k1 curve in this package. Implementations must be safe for concurrent use; Secp256k1Provider holds no
mutable state.
"""
from abc import ABC, abstractmethod

from hdkeys.core import ECC, CryptoFailureError, InvalidKeyMaterialError, ReadError
from hdkeys.cryptography.ecc import SECP256K1, EllipticCurve
from hdkeys.cryptography.ecc_keys import PubKey
from hdkeys.cryptography.ecdsa import ecdsa, verify_ecdsa, encode_der_signature, decode_der_signature
from hdkeys.cryptography.hash_functions import hmac_sha512, sha256, hash160

__all__ = ["CryptoProvider", "Secp256k1Provider", "DEFAULT_PROVIDER"]


class CryptoProvider(ABC):
    """
    Abstract provider of the primitives used in BIP32 derivation
    """

    @abstractmethod
    def hmac_sha512(self, key: bytes, message: bytes) -> bytes:
        """Returns the 64-byte HMAC-SHA512 of message under key"""

    @abstractmethod
    def sha256(self, message: bytes) -> bytes:
        """Returns the 32-byte SHA256 digest"""

    @abstractmethod
    def hash160(self, message: bytes) -> bytes:
        """Returns the 20-byte RIPEMD160(SHA256(message))"""

    @abstractmethod
    def scalar_add(self, scalar: bytes, tweak: bytes) -> bytes:
        """
        Returns (scalar + tweak) mod n as 32 bytes. Raises InvalidKeyMaterialError if the tweak is >= n or the
        result is zero.
        """

    @abstractmethod
    def is_valid_scalar(self, scalar: bytes) -> bool:
        """True if scalar is 32 bytes encoding an integer in [1, n-1]"""

    @abstractmethod
    def is_valid_pubkey(self, pubkey: bytes) -> bool:
        """True if pubkey is a SEC1 encoded point on the curve"""

    @abstractmethod
    def export_pubkey_compressed(self, scalar: bytes) -> bytes:
        """Returns the 33-byte compressed public key for the scalar"""

    @abstractmethod
    def export_pubkey_uncompressed(self, scalar: bytes) -> bytes:
        """Returns the 65-byte uncompressed public key for the scalar"""

    @abstractmethod
    def sign(self, scalar: bytes, message_hash: bytes) -> bytes:
        """Returns a DER-encoded ECDSA signature of the message hash"""

    @abstractmethod
    def verify(self, pubkey: bytes, message_hash: bytes, signature: bytes) -> bool:
        """Returns True if the DER signature is valid for the SEC1 encoded pubkey and message hash"""

    def hash256(self, message: bytes) -> bytes:
        """SHA256(SHA256(message))"""
        return self.sha256(self.sha256(message))


class Secp256k1Provider(CryptoProvider):

    def __init__(self, curve: EllipticCurve = SECP256K1):
        self.curve = curve

    def __repr__(self):
        return f"{self.__class__.__name__}(curve={self.curve.curve})"

    # --- INTERNAL --- #
    @staticmethod
    def _check_bytes(data, length: int | None, name: str):
        if not isinstance(data, (bytes, bytearray)):
            raise CryptoFailureError(f"{name} must be bytes, received {type(data).__name__}")
        if length is not None and len(data) != length:
            raise CryptoFailureError(f"{name} must be {length} bytes, received {len(data)}")

    def _scalar_int(self, scalar: bytes) -> int:
        self._check_bytes(scalar, ECC.PRIVKEY_BYTES, "Scalar")
        value = int.from_bytes(scalar, "big")
        if not 0 < value < self.curve.order:
            raise InvalidKeyMaterialError("Scalar not in range [1, n-1]")
        return value

    def _pubkey(self, scalar: bytes) -> PubKey:
        return PubKey(self._scalar_int(scalar), curve=self.curve)

    # --- HASHES --- #
    def hmac_sha512(self, key: bytes, message: bytes) -> bytes:
        self._check_bytes(key, None, "HMAC key")
        self._check_bytes(message, None, "HMAC message")
        try:
            return hmac_sha512(key=bytes(key), message=bytes(message))
        except (TypeError, ValueError) as e:
            raise CryptoFailureError("HMAC-SHA512 failed") from e

    def sha256(self, message: bytes) -> bytes:
        self._check_bytes(message, None, "SHA256 message")
        return sha256(bytes(message))

    def hash160(self, message: bytes) -> bytes:
        self._check_bytes(message, None, "HASH160 message")
        return hash160(bytes(message))

    # --- CURVE --- #
    def scalar_add(self, scalar: bytes, tweak: bytes) -> bytes:
        scalar_int = self._scalar_int(scalar)
        self._check_bytes(tweak, ECC.PRIVKEY_BYTES, "Tweak")

        tweak_int = int.from_bytes(tweak, "big")
        if tweak_int >= self.curve.order:
            raise InvalidKeyMaterialError("Tweak is not less than the curve order")

        result = (scalar_int + tweak_int) % self.curve.order
        if result == 0:
            raise InvalidKeyMaterialError("Tweaked scalar is zero")
        return result.to_bytes(ECC.PRIVKEY_BYTES, "big")

    def is_valid_scalar(self, scalar: bytes) -> bool:
        if not isinstance(scalar, (bytes, bytearray)) or len(scalar) != ECC.PRIVKEY_BYTES:
            return False
        return 0 < int.from_bytes(scalar, "big") < self.curve.order

    def is_valid_pubkey(self, pubkey: bytes) -> bool:
        if not isinstance(pubkey, (bytes, bytearray)):
            return False
        try:
            PubKey.from_bytes(bytes(pubkey), curve=self.curve)
        except (InvalidKeyMaterialError, ReadError):
            return False
        return True

    def export_pubkey_compressed(self, scalar: bytes) -> bytes:
        return self._pubkey(scalar).compressed()

    def export_pubkey_uncompressed(self, scalar: bytes) -> bytes:
        return self._pubkey(scalar).uncompressed()

    # --- SIGNATURES --- #
    def sign(self, scalar: bytes, message_hash: bytes) -> bytes:
        self._check_bytes(message_hash, None, "Message hash")
        r, s = ecdsa(self._scalar_int(scalar), bytes(message_hash), curve=self.curve)
        return encode_der_signature(r, s)

    def verify(self, pubkey: bytes, message_hash: bytes, signature: bytes) -> bool:
        self._check_bytes(message_hash, None, "Message hash")
        point = PubKey.from_bytes(bytes(pubkey), curve=self.curve).to_point()
        try:
            r, s = decode_der_signature(bytes(signature))
        except ValueError as e:
            raise CryptoFailureError("Malformed DER signature") from e
        return verify_ecdsa((r, s), bytes(message_hash), point, curve=self.curve)


DEFAULT_PROVIDER = Secp256k1Provider()
