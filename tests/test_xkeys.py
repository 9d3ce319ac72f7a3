"""
Tests for extended keys
"""
from secrets import token_bytes

import pytest

from hdkeys.core import XKEYS, ChecksumMismatchError, DepthExhaustedError, ExtendedKeyError, \
    InvalidKeyMaterialError, MalformedEncodingError, PayloadLengthError, UnknownVersionError, InvalidBase58Error, \
    PathParseError
from hdkeys.cryptography import hash160, hash256
from hdkeys.data import encode_base58
from hdkeys.wallet import ChildNumber, DerivationPath, ExtendedPrivKey, ExtendedPubKey, TESTNET, \
    decode_extended_key, decode_with_network
from tests.vectors import SEED_1, VALID_VECTORS, INVALID_VECTORS

KNOWN_MASTER_SECRET = "e8f32e723decf4051aefac8e2c93c9c5b214313817cdb01a1494b917c8436b35"
KNOWN_MASTER_CHAIN_CODE = "873dff81c02f525623fd1fe5167eac3a55a049de3d314bb42ee227ffed37d508"
KNOWN_MASTER_PUBKEY = "0339a36013301597daef41fbe593a02cc513d0b55527ec2df1050e2e8ff49c85c2"
KNOWN_MASTER_IDENTIFIER = "3442193e1bb70916e914552172cd4e2dbc9df811"

TAMPERED_XPRV = "xprv9s21ZrQH143K3QTDL4LXw2F7HEK3wJUD2nW2nRk4stbPy6cq3jPPqjiChkVvvNKmPGJxWUtg6LnF5kejMRNNU3TGtRBeJgk33yuGBxrMPHL"


def random_seed() -> bytes:
    return token_bytes(32)


def random_path(length: int) -> DerivationPath:
    children = [ChildNumber(int.from_bytes(token_bytes(4), "big") % XKEYS.HARDENED_OFFSET,
                            hardened=token_bytes(1)[0] & 1 == 1) for _ in range(length)]
    return DerivationPath(tuple(children))


@pytest.mark.parametrize("seed, path, xprv, xpub", VALID_VECTORS)
def test_bip32_vectors(seed, path, xprv, xpub):
    """
    The private and public encodings for each official test vector must match exactly
    """
    key = ExtendedPrivKey.derive(bytes.fromhex(seed), path)
    assert key.encode(is_public=False) == xprv, f"Private encoding mismatch for path {path}"
    assert key.encode(is_public=True) == xpub, f"Public encoding mismatch for path {path}"
    assert key.to_public().encode() == xpub


def test_master_key_fields(master_key):
    """
    We verify the master key of test vector 1 against the published values
    """
    assert master_key.secret_key.hex() == KNOWN_MASTER_SECRET
    assert master_key.chain_code.hex() == KNOWN_MASTER_CHAIN_CODE
    assert master_key.public_key().hex() == KNOWN_MASTER_PUBKEY
    assert master_key.identifier().hex() == KNOWN_MASTER_IDENTIFIER
    assert master_key.fingerprint().hex() == KNOWN_MASTER_IDENTIFIER[:8]
    assert master_key.depth == 0
    assert master_key.parent_fingerprint == b'\x00' * 4
    assert master_key.child_number == ChildNumber(0)


def test_empty_path_is_master(master_key):
    seed = bytes.fromhex(SEED_1)
    assert ExtendedPrivKey.derive(seed) == master_key
    assert ExtendedPrivKey.derive(seed, "m") == master_key
    assert ExtendedPrivKey.derive(seed, DerivationPath()) == master_key


def test_derive_rejects_bad_path_and_seed():
    """
    An empty path string is malformed rather than a request for the master key
    """
    seed = bytes.fromhex(SEED_1)
    with pytest.raises(PathParseError):
        ExtendedPrivKey.derive(seed, "")
    with pytest.raises(PathParseError):
        ExtendedPrivKey.derive(seed, "0'/1")

    # Seed must be bytes
    with pytest.raises(ExtendedKeyError):
        ExtendedPrivKey.derive(SEED_1)
    with pytest.raises(ExtendedKeyError):
        ExtendedPrivKey.derive(None)


def test_determinism():
    """
    Identical inputs give identical keys and encodings
    """
    seed = random_seed()
    path = random_path(4)
    key1 = ExtendedPrivKey.derive(seed, path)
    key2 = ExtendedPrivKey.derive(seed, path)

    assert key1 == key2
    assert key1.encode() == key2.encode()
    assert key1.encode(is_public=True) == key2.encode(is_public=True)


@pytest.mark.parametrize("length", [0, 1, 3, 6])
def test_depth_law(length):
    key = ExtendedPrivKey.derive(random_seed(), random_path(length))
    assert key.depth == length


def test_fingerprint_linkage_and_index(master_key):
    """
    Each child carries its parent's fingerprint and the child number used to derive it
    """
    parent = master_key
    for child_number in DerivationPath.parse("m/0'/1/2h/2/1000000000"):
        child = parent.child(child_number)
        assert child.parent_fingerprint == parent.fingerprint()
        assert child.parent_fingerprint == hash160(parent.public_key())[:4]
        assert child.child_number == child_number
        assert child.depth == parent.depth + 1
        parent = child


def test_child_accepts_raw_index(master_key):
    hardened = master_key.child(XKEYS.HARDENED_OFFSET + 7)
    assert hardened == master_key.child(ChildNumber(7, hardened=True))
    assert hardened.child_number.to_bytes() == (7 | 0x80000000).to_bytes(4, "big")

    normal = master_key.child(7)
    assert normal.child_number.to_bytes() == (7).to_bytes(4, "big")
    assert normal != hardened


def test_derive_path_from_intermediate_key(master_key):
    """
    Deriving in two steps gives the same key as deriving the full path
    """
    account = master_key.derive_path("m/44'/0'/0'")
    address_key = account.derive_path("m/0/5")
    assert address_key == master_key.derive_path("m/44'/0'/0'/0/5")
    assert address_key.depth == 5


def test_parent_is_not_mutated(master_key):
    before = master_key.encode()
    master_key.child(ChildNumber(1))
    master_key.child(ChildNumber(1, hardened=True))
    assert master_key.encode() == before

    with pytest.raises(AttributeError):
        master_key.depth = 4


def test_depth_exhausted(master_key):
    deepest = ExtendedPrivKey(
        depth=XKEYS.MAX_DEPTH,
        parent_fingerprint=token_bytes(4),
        child_number=ChildNumber(3),
        secret_key=master_key.secret_key,
        chain_code=master_key.chain_code
    )
    with pytest.raises(DepthExhaustedError):
        deepest.child(ChildNumber(0))
    with pytest.raises(DepthExhaustedError):
        deepest.child(ChildNumber(0, hardened=True))

    # One below the maximum still derives
    almost = ExtendedPrivKey(XKEYS.MAX_DEPTH - 1, token_bytes(4), ChildNumber(3), master_key.secret_key,
                             master_key.chain_code)
    assert almost.child(ChildNumber(0)).depth == XKEYS.MAX_DEPTH


def test_private_round_trip():
    key = ExtendedPrivKey.derive(random_seed(), random_path(3))

    assert ExtendedPrivKey.decode(key.encode()) == key
    assert decode_extended_key(key.encode()) == key


def test_public_round_trip():
    key = ExtendedPrivKey.derive(random_seed(), random_path(3))
    decoded = decode_extended_key(key.encode(is_public=True))

    assert isinstance(decoded, ExtendedPubKey)
    assert decoded.depth == key.depth
    assert decoded.parent_fingerprint == key.parent_fingerprint
    assert decoded.child_number == key.child_number
    assert decoded.chain_code == key.chain_code
    assert decoded.public_key == key.public_key()
    assert decoded.fingerprint() == key.fingerprint()
    assert decoded == key.to_public()
    assert decoded.encode() == key.encode(is_public=True)


def test_testnet_round_trip():
    key = ExtendedPrivKey.derive(random_seed(), "m/84'/1'/0'")
    tprv = key.encode(network=TESTNET)
    tpub = key.encode(is_public=True, network=TESTNET)
    assert tprv.startswith("tprv")
    assert tpub.startswith("tpub")

    decoded, network = decode_with_network(tprv)
    assert decoded == key
    assert network == TESTNET


def test_serialized_layout(master_key):
    serial = master_key.to_bytes()
    assert len(serial) == XKEYS.SERIAL_BYTES
    assert serial[:4] == XKEYS.MAINNET_PRIVATE
    assert serial[4] == 0
    assert serial[5:9] == b'\x00' * 4
    assert serial[9:13] == b'\x00' * 4
    assert serial[13:45] == master_key.chain_code
    assert serial[45:78] == b'\x00' + master_key.secret_key
    assert serial[78:] == hash256(serial[:78])[:4]

    public_serial = master_key.to_bytes(is_public=True)
    assert public_serial[:4] == XKEYS.MAINNET_PUBLIC
    assert public_serial[45:78] == master_key.public_key()


def test_tampered_encoding_fails_checksum():
    with pytest.raises(ChecksumMismatchError):
        decode_extended_key(TAMPERED_XPRV)


def test_single_character_tamper(master_key):
    """
    Changing one character in the middle of an encoding breaks the checksum
    """
    encoded = master_key.encode()
    position = len(encoded) // 2
    replacement = "2" if encoded[position] != "2" else "3"
    tampered = encoded[:position] + replacement + encoded[position + 1:]

    with pytest.raises(ChecksumMismatchError):
        decode_extended_key(tampered)


@pytest.mark.parametrize("encoded, reason", INVALID_VECTORS)
def test_invalid_vectors(encoded, reason):
    with pytest.raises(ExtendedKeyError):
        decode_extended_key(encoded)


def test_specific_decode_failures(master_key):
    payload = master_key.to_bytes()[:78]

    # Unknown version with a valid checksum
    unknown = b'\xde\xad\xbe\xef' + payload[4:]
    with pytest.raises(UnknownVersionError):
        decode_extended_key(encode_base58(unknown + hash256(unknown)[:4]))

    # Wrong length
    short = payload[:-1]
    with pytest.raises(PayloadLengthError):
        decode_extended_key(encode_base58(short + hash256(short)[:4]))

    # Bad alphabet
    with pytest.raises(InvalidBase58Error):
        decode_extended_key("xprv0OIl" + master_key.encode()[8:])

    # Private key 0
    zero_key = payload[:45] + b'\x00' * 33
    with pytest.raises(InvalidKeyMaterialError):
        decode_extended_key(encode_base58(zero_key + hash256(zero_key)[:4]))

    # Zero depth with non-zero child number
    bad_index = payload[:9] + b'\x00\x00\x00\x01' + payload[13:]
    with pytest.raises(MalformedEncodingError):
        decode_extended_key(encode_base58(bad_index + hash256(bad_index)[:4]))


def test_decode_public_as_private_fails(master_key):
    with pytest.raises(MalformedEncodingError):
        ExtendedPrivKey.decode(master_key.encode(is_public=True))

    # The reverse neuters the private key
    assert ExtendedPubKey.decode(master_key.encode()) == master_key.to_public()


def test_secret_not_in_repr(master_key):
    assert master_key.secret_key.hex() not in repr(master_key)
    assert "secret_key" not in repr(master_key)


def test_sign_and_verify(master_key):
    message_hash = hash256(b"hdkeys")
    child = master_key.derive_path("m/0'/1")
    signature = child.sign(message_hash)

    assert child.to_public().verify(message_hash, signature)
    assert not master_key.to_public().verify(message_hash, signature)


def test_constructor_validation(master_key):
    with pytest.raises(ExtendedKeyError):
        ExtendedPrivKey(0, b'\x00' * 3, ChildNumber(0), master_key.secret_key, master_key.chain_code)
    with pytest.raises(ExtendedKeyError):
        ExtendedPrivKey(0, b'\x00' * 4, ChildNumber(0), master_key.secret_key, master_key.chain_code[:31])
    with pytest.raises(ExtendedKeyError):
        ExtendedPrivKey(256, b'\x00' * 4, ChildNumber(0), master_key.secret_key, master_key.chain_code)
    with pytest.raises(ExtendedKeyError):
        ExtendedPubKey(0, b'\x00' * 4, ChildNumber(0), master_key.public_key()[1:], master_key.chain_code)


def test_to_dict(master_key):
    key_dict = master_key.to_dict()
    assert key_dict["xprv"] == VALID_VECTORS[0][2]
    assert key_dict["xpub"] == VALID_VECTORS[0][3]
    assert key_dict["fingerprint"] == KNOWN_MASTER_IDENTIFIER[:8]
    assert master_key.to_public().to_dict()["xpub"] == VALID_VECTORS[0][3]
