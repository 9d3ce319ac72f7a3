"""
The PubKey class - the secp256k1 public key for a private scalar, along with its SEC1 serializations
"""
import json

from hdkeys.core import ECC, SERIALIZED, InvalidKeyMaterialError, get_stream, read_stream, read_big_int
from hdkeys.cryptography.ecc import EllipticCurve, SECP256K1, Point

__all__ = ["PubKey"]
BYTE_LEN = ECC.COORD_BYTES


class PubKey:
    __slots__ = ("point", "curve")

    def __init__(self, private_key: int, curve: EllipticCurve = SECP256K1):
        if not 0 < private_key < curve.order:
            raise InvalidKeyMaterialError("Private key not in range [1, n-1]")

        self.curve = curve
        self.point = curve.multiply_generator(private_key)

    def __eq__(self, other):
        if not isinstance(other, PubKey):
            return False
        return self.point == other.point

    def __hash__(self):
        return hash(self.point.tuple)

    def __repr__(self):
        return f"PubKey({self.compressed().hex()})"

    @classmethod
    def from_point(cls, point: Point, curve: EllipticCurve = SECP256K1) -> "PubKey":
        if not point or not (point.x < curve.p and point.y < curve.p) or not curve.is_point_on_curve(point):
            raise InvalidKeyMaterialError("Point is not a valid public key")
        instance = cls.__new__(cls)
        instance.curve = curve
        instance.point = point
        return instance

    @classmethod
    def from_bytes(cls, byte_stream: SERIALIZED, curve: EllipticCurve = SECP256K1) -> "PubKey":
        """
        Reads a 33-byte compressed or 65-byte uncompressed SEC1 public key
        """
        stream = get_stream(byte_stream)
        type_byte = read_stream(stream, 1, "pubkey_type")
        x_int = read_big_int(stream, BYTE_LEN, "pubkey_x")

        if type_byte in (b'\x02', b'\x03'):
            try:
                y_int = curve.find_y_from_x(x_int)
            except ValueError as e:
                raise InvalidKeyMaterialError("Compressed public key x coordinate is not on the curve") from e
            # find_y_from_x returns one root; pick the one with matching parity
            if y_int % 2 != type_byte[0] - 2:
                y_int = curve.p - y_int
        elif type_byte == b'\x04':
            y_int = read_big_int(stream, BYTE_LEN, "pubkey_y")
        else:
            raise InvalidKeyMaterialError(f"Unidentified type byte for Public Key: {type_byte.hex()}")

        if stream.read(1):
            raise InvalidKeyMaterialError("Trailing data after public key")

        return cls.from_point(Point(x_int, y_int), curve)

    def _x_bytes(self) -> bytes:
        return self.point.x.to_bytes(length=BYTE_LEN, byteorder='big')

    def _y_bytes(self) -> bytes:
        return self.point.y.to_bytes(length=BYTE_LEN, byteorder='big')

    def compressed(self) -> bytes:
        """Returns the 33-byte compressed pubkey"""
        prefix = b'\x02' if self.point.y % 2 == 0 else b'\x03'
        return prefix + self._x_bytes()

    def uncompressed(self) -> bytes:
        """Returns the 65-byte uncompressed pubkey"""
        return b''.join([b'\x04', self._x_bytes(), self._y_bytes()])

    def to_point(self) -> Point:
        return self.point

    def to_dict(self):
        pkx, pky = self.point.tuple
        return {
            "pubkey_point": (hex(pkx), hex(pky)),
            "uncompressed": self.uncompressed().hex(),
            "compressed": self.compressed().hex(),
        }

    def to_json(self):
        return json.dumps(self.to_dict(), indent=2)
