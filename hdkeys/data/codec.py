"""
Methods for base58 and base58check encoding and decoding
"""
from hdkeys.core import BUFFERS, XKEYS, DataEncodingError, InvalidBase58Error, PayloadLengthError, \
    ChecksumMismatchError
from hdkeys.cryptography.hash_functions import hash256

__all__ = ["BASE58_ALPHABET", "encode_base58", "decode_base58", "encode_base58check", "decode_base58check",
           "strip_checksum"]

# --- BASE58 ENCODING --- #
BASE58_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
_BASE58_INDEX = {char: i for i, char in enumerate(BASE58_ALPHABET)}


def encode_base58(data: bytes, max_length: int = BUFFERS.TEXT) -> str:
    """
    We return the base58 encoding of the given bytes data. Raises DataEncodingError if the result would be longer
    than max_length characters.
    """
    n = int.from_bytes(data, byteorder="big")
    chars = []
    while n > 0:
        n, remainder = divmod(n, 58)
        chars.append(BASE58_ALPHABET[remainder])

    # Each leading zero byte is written as a '1'
    leading_zeros = len(data) - len(data.lstrip(b'\x00'))
    encoded_string = "1" * leading_zeros + "".join(reversed(chars))

    if len(encoded_string) > max_length:
        raise DataEncodingError(f"Base58 output of {len(encoded_string)} chars exceeds capacity of {max_length}")
    return encoded_string


def decode_base58(data: str, max_length: int = BUFFERS.TEXT) -> bytes:
    """
    Given a base58 encoded string, return the underlying bytes. Raises InvalidBase58Error for characters outside
    the alphabet and PayloadLengthError for input longer than max_length.
    """
    if len(data) > max_length:
        raise PayloadLengthError(f"Base58 input of {len(data)} chars exceeds capacity of {max_length}")

    total = 0
    for position, char in enumerate(data):
        try:
            total = total * 58 + _BASE58_INDEX[char]
        except KeyError:
            raise InvalidBase58Error(f"Invalid base58 character {char!r} at position {position}") from None

    decoded_bytes = total.to_bytes((total.bit_length() + 7) // 8, "big")

    # Each leading '1' represents a leading zero byte
    leading_zeros = len(data) - len(data.lstrip("1"))
    return b'\x00' * leading_zeros + decoded_bytes


def encode_base58check(data: bytes, max_length: int = BUFFERS.TEXT) -> str:
    """
    Given bytes data, we return the base58 encoding along with checksum
    """
    checksum = hash256(data)[:XKEYS.CHECKSUM]
    return encode_base58(data + checksum, max_length)


def decode_base58check(data: str, max_length: int = BUFFERS.TEXT) -> bytes:
    """
    Given a string of base58Check chars, we decode it and return the payload without its checksum.
    Raise ChecksumMismatchError if checksum fails
    """
    return strip_checksum(decode_base58(data, max_length))


def strip_checksum(serialized: bytes) -> bytes:
    """
    Verifies the trailing 4-byte HASH256 checksum and returns the payload preceding it
    """
    if len(serialized) < XKEYS.CHECKSUM:
        raise PayloadLengthError("Decoded data is shorter than the checksum")

    payload, checksum = serialized[:-XKEYS.CHECKSUM], serialized[-XKEYS.CHECKSUM:]
    if hash256(payload)[:XKEYS.CHECKSUM] != checksum:
        raise ChecksumMismatchError("Decoded checksum does not equal given checksum")
    return payload
