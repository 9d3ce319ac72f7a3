"""
Elliptic curves over prime fields, and the secp256k1 singleton used for key derivation
"""
import json
from dataclasses import dataclass
from typing import Optional, Tuple

from .ecc_math import is_quadratic_residue, tonelli_shanks

__all__ = ["EllipticCurve", "Point", "SECP256K1"]


@dataclass(frozen=True)
class Point:
    """Immutable affine point. The point at infinity is Point() = (None, None)"""
    x: Optional[int] = None
    y: Optional[int] = None

    def __post_init__(self):
        if (self.x is None) != (self.y is None):
            raise ValueError("Point at infinity must have both coordinates as None")

    def __bool__(self) -> bool:
        """Point at infinity is falsy"""
        return self.x is not None

    def __iter__(self):
        """Allow tuple unpacking: x, y = point"""
        return iter((self.x, self.y))

    @property
    def tuple(self):
        return self.x, self.y


class EllipticCurve:
    """
    The curve E: y^2 = x^3 + ax + b (mod p), along with the order of its cyclic group of rational points and a
    generator of that group.
    """

    def __init__(self, a: int, b: int, p: int, order: int, generator: Tuple[int, int] | Point,
                 curve: Optional[str] = None):
        if (4 * pow(a, 3) + 27 * pow(b, 2)) % p == 0:
            raise ValueError("Cannot use Singular curve in ECC")

        self.a = a
        self.b = b
        self.p = p
        self.order = order
        self.generator = Point(*generator) if isinstance(generator, tuple) else generator
        self.curve = curve

        # G, 2G, 4G, ... for generator multiplication
        self._generator_doubles = self._precompute_generator_doubles()

    def __repr__(self):
        hex_dict = {
            'a': hex(self.a),
            'b': hex(self.b),
            'p': hex(self.p),
            'order': hex(self.order),
            'generator': (hex(self.generator.x), hex(self.generator.y)),
        }
        if self.curve:
            hex_dict.update({'curve': self.curve})
        return json.dumps(hex_dict)

    def _precompute_generator_doubles(self) -> list:
        doubles = []
        current = self.generator
        for _ in range(self.order.bit_length()):
            if not current:
                break
            doubles.append(current)
            current = self.double_point(current)
        return doubles

    def x_terms(self, x: int) -> int:
        """Compute x^3 + ax + b mod p"""
        return (pow(x, 3, self.p) + self.a * x + self.b) % self.p

    def is_point_on_curve(self, point: Point) -> bool:
        if not point:
            return True
        return (point.y * point.y - self.x_terms(point.x)) % self.p == 0

    def is_x_on_curve(self, x: int) -> bool:
        return is_quadratic_residue(self.x_terms(x), self.p)

    def find_y_from_x(self, x: int) -> int:
        """
        Returns the smaller of the two y values for the given x. Raises ValueError if x is not on the curve.
        """
        if not 0 <= x < self.p or not self.is_x_on_curve(x):
            raise ValueError(f"Given x coordinate {x} is not on the curve.")
        y = tonelli_shanks(self.x_terms(x), self.p)
        return min(y, (-y) % self.p)

    def double_point(self, point: Point) -> Point:
        if not point or point.y == 0:
            return Point()

        x, y = point
        m = ((3 * x * x + self.a) * pow(2 * y, -1, self.p)) % self.p
        x3 = (m * m - 2 * x) % self.p
        y3 = (m * (x - x3) - y) % self.p
        return Point(x3, y3)

    def add_points(self, point1: Point, point2: Point) -> Point:
        if not point1:
            return point2
        if not point2:
            return point1

        x1, y1 = point1
        x2, y2 = point2
        if x1 == x2:
            # Same point or inverses
            return self.double_point(point1) if y1 == y2 else Point()

        m = ((y2 - y1) * pow(x2 - x1, -1, self.p)) % self.p
        x3 = (m * m - x1 - x2) % self.p
        y3 = (m * (x1 - x3) - y1) % self.p
        return Point(x3, y3)

    def scalar_multiplication(self, n: int, point: Point) -> Point:
        """Double-and-add"""
        if not point:
            return Point()

        n %= self.order
        if point == self.generator:
            return self.multiply_generator(n)

        result = Point()
        addend = point
        while n:
            if n & 1:
                result = self.add_points(result, addend)
            addend = self.double_point(addend)
            n >>= 1
        return result

    def multiply_generator(self, n: int) -> Point:
        """Uses the precomputed doubles of the generator"""
        n %= self.order
        result = Point()
        for bit, double in enumerate(self._generator_doubles):
            if n >> bit == 0:
                break
            if (n >> bit) & 1:
                result = self.add_points(result, double)
        return result


# --- SINGLETON INSTANCE --- #
SECP256K1 = EllipticCurve(
    a=0,
    b=7,
    p=0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEFFFFFC2F,
    order=0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141,
    generator=(0x79BE667EF9DCBBAC55A06295CE870B07029BFCDB2DCE28D959F2815B16F81798,
               0x483ADA7726A3C4655DA4FBFC0E1108A8FD17B448A68554199C47D08FFB10D4B8),
    curve="secp256k1"
)
