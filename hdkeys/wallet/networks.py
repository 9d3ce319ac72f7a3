"""
Extended key version bytes, grouped by network
"""
from dataclasses import dataclass

from hdkeys.core import XKEYS, UnknownVersionError

__all__ = ["Network", "MAINNET", "TESTNET", "BIP49_MAINNET", "BIP84_MAINNET", "NETWORKS", "lookup_version"]


@dataclass(frozen=True)
class Network:
    name: str
    private_version: bytes
    public_version: bytes

    def version(self, is_public: bool) -> bytes:
        return self.public_version if is_public else self.private_version


MAINNET = Network("mainnet", XKEYS.MAINNET_PRIVATE, XKEYS.MAINNET_PUBLIC)  # xprv / xpub
TESTNET = Network("testnet", XKEYS.TESTNET_PRIVATE, XKEYS.TESTNET_PUBLIC)  # tprv / tpub
BIP49_MAINNET = Network("bip49-mainnet", XKEYS.BIP49_XPRV, XKEYS.BIP49_XPUB)  # yprv / ypub
BIP84_MAINNET = Network("bip84-mainnet", XKEYS.BIP84_XPRV, XKEYS.BIP84_XPUB)  # zprv / zpub

NETWORKS = (MAINNET, TESTNET, BIP49_MAINNET, BIP84_MAINNET)

_VERSIONS = {}
for _network in NETWORKS:
    _VERSIONS[_network.private_version] = (_network, False)
    _VERSIONS[_network.public_version] = (_network, True)


def lookup_version(version: bytes) -> tuple[Network, bool]:
    """
    Returns the network and whether the version denotes a public key
    """
    try:
        return _VERSIONS[bytes(version)]
    except KeyError:
        raise UnknownVersionError(f"Unrecognized extended key version: {bytes(version).hex()}") from None
