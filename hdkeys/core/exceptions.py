"""
The custom exceptions used throughout hdkeys
"""
__all__ = ["ExtendedKeyError", "BufferOverflowError", "CryptoFailureError", "InvalidKeyMaterialError",
           "DepthExhaustedError", "DataEncodingError", "ChecksumMismatchError", "MalformedEncodingError",
           "InvalidBase58Error", "PayloadLengthError", "UnknownVersionError", "ReadError", "PathParseError"]


class ExtendedKeyError(Exception):
    """
    Parent class for all extended key errors
    """
    pass


class BufferOverflowError(ExtendedKeyError):
    """
    For when writing into a fixed-capacity buffer would exceed its capacity
    """
    pass


class CryptoFailureError(ExtendedKeyError):
    """
    Raised when a hash, HMAC or curve operation fails inside the crypto provider
    """
    pass


class InvalidKeyMaterialError(ExtendedKeyError):
    """
    For scalars or points that are out of range for the curve
    """
    pass


class DepthExhaustedError(ExtendedKeyError):
    """
    For derivation requested past the maximum depth of 255
    """
    pass


class DataEncodingError(ExtendedKeyError):
    """
    For use in encoding algorithms, e.g. base58 output exceeding its capacity
    """
    pass


class ChecksumMismatchError(ExtendedKeyError):
    """
    The base58check checksum doesn't match the decoded payload
    """
    pass


class MalformedEncodingError(ExtendedKeyError):
    """
    Parent class for decoding errors where the encoded data is structurally invalid
    """
    pass


class InvalidBase58Error(MalformedEncodingError):
    """
    For characters outside the base58 alphabet
    """
    pass


class PayloadLengthError(MalformedEncodingError):
    """
    For a decoded payload of the wrong total length
    """
    pass


class UnknownVersionError(MalformedEncodingError):
    """
    For an unrecognized 4-byte version prefix
    """
    pass


class ReadError(MalformedEncodingError):
    """
    For when trying to read data of length n from the stream and receiving data of length < n
    """
    pass


class PathParseError(ExtendedKeyError):
    """
    For malformed derivation path strings and out of range child indices
    """
    pass
