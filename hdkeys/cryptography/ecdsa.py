"""
Methods to create and verify a signature created using ECDSA
"""
import secrets
from typing import Tuple

from cryptography.hazmat.primitives.asymmetric.utils import encode_dss_signature, decode_dss_signature

from hdkeys.core import InvalidKeyMaterialError
from hdkeys.cryptography.ecc import SECP256K1, EllipticCurve, Point

__all__ = ["ecdsa", "verify_ecdsa", "encode_der_signature", "decode_der_signature"]


def _truncate_message(message: bytes, n: int) -> int:
    """Keep the n.bit_length() leftmost bits of the message"""
    z = int.from_bytes(message, 'big')
    excess = len(message) * 8 - n.bit_length()
    if excess > 0:
        z >>= excess
    return z


def ecdsa(private_key: int, message: bytes, curve: EllipticCurve = SECP256K1) -> Tuple[int, int]:
    """
    Generates an ECDSA signature (r, s) for a given private_key and message hash.

    Algorithm:
    ----------
    1) Compute z as the integer value of the first n bits of message hash.
    2) Select a random integer k in [1, n-1].
    3) Calculate curve point (x, y) = k * generator.
    4) Compute r = x (mod n) and s = k^(-1)(z + r * private_key) (mod n).
    5) If r or s is 0, repeat from step 2.
    6) Return (r, s), using low s as per BIP-62.
    """
    n = curve.order
    if not 0 < private_key < n:
        raise InvalidKeyMaterialError("Private key not in range [1, n-1]")

    z = _truncate_message(message, n)

    while True:
        k = 1 + secrets.randbelow(n - 1)
        x, _ = curve.multiply_generator(k)

        r = x % n
        if r == 0:
            continue

        s = (pow(k, -1, n) * (z + r * private_key)) % n
        if s == 0:
            continue
        break

    if s > n // 2:
        s = n - s

    return r, s


def verify_ecdsa(signature: Tuple[int, int], message: bytes, public_key: Point,
                 curve: EllipticCurve = SECP256K1) -> bool:
    """
    We verify that the given signature corresponds to the public_key for the given message hash.

    1) Verify that (r,s) are integers in the interval [1,n-1]
    2) Let z be the integer value of the first n bits of the message hash
    3) Let u1 = z * s^(-1) (mod n) and u2 = r * s^(-1) (mod n)
    4) Calculate the curve point (x,y) = (u1 * generator) + (u2 * public_key)
    5) The signature is valid if r = x (mod n)
    """
    n = curve.order
    r, s = signature

    if not (1 <= r < n and 1 <= s < n):
        return False

    z = _truncate_message(message, n)

    s_inv = pow(s, -1, n)
    u1 = (z * s_inv) % n
    u2 = (r * s_inv) % n

    final_pt = curve.add_points(curve.multiply_generator(u1), curve.scalar_multiplication(u2, public_key))
    if not final_pt:
        return False

    return r == final_pt.x % n


# --- DER SIGNATURE ENCODING --- #
def encode_der_signature(r: int, s: int) -> bytes:
    """
    Encodes ECDSA integers r and s into a DER-encoded signature.
    """
    return encode_dss_signature(r, s)


def decode_der_signature(der_sig: bytes) -> Tuple[int, int]:
    """
    Decodes a DER-encoded ECDSA signature back into integers r and s.
    """
    return decode_dss_signature(der_sig)
