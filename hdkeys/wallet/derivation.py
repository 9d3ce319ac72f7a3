"""
The ChildNumber and DerivationPath classes, and the Purpose enum for the standard BIP44-style paths
"""
import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterator

from hdkeys.core import XKEYS, PathParseError

__all__ = ["ChildNumber", "DerivationPath", "Purpose"]

HARDENED_OFFSET = XKEYS.HARDENED_OFFSET
_SEGMENT = re.compile(r"([0-9]+)(['hH]?)")


@dataclass(frozen=True, order=True)
class ChildNumber:
    """
    A child index in [0, 2^31) together with its hardened flag
    """
    index: int
    hardened: bool = False

    def __post_init__(self):
        if isinstance(self.index, bool) or not isinstance(self.index, int):
            raise PathParseError(f"Child index must be an integer, received {type(self.index).__name__}")
        if not 0 <= self.index < HARDENED_OFFSET:
            raise PathParseError(f"Child index {self.index} not in range [0, 2^31)")

    def __str__(self):
        return f"{self.index}'" if self.hardened else str(self.index)

    def __int__(self):
        return self.to_int()

    @classmethod
    def normal(cls, index: int) -> "ChildNumber":
        return cls(index, hardened=False)

    @classmethod
    def hardened_from(cls, index: int) -> "ChildNumber":
        return cls(index, hardened=True)

    @classmethod
    def from_int(cls, value: int) -> "ChildNumber":
        """
        From the 32-bit serialized form, where the high bit marks a hardened index
        """
        if isinstance(value, bool) or not isinstance(value, int):
            raise PathParseError(f"Child number must be an integer, received {type(value).__name__}")
        if not 0 <= value <= XKEYS.MAX_INDEX:
            raise PathParseError(f"Child number {value} not in range [0, 2^32)")
        if value >= HARDENED_OFFSET:
            return cls(value - HARDENED_OFFSET, hardened=True)
        return cls(value)

    @classmethod
    def from_bytes(cls, data: bytes) -> "ChildNumber":
        if len(data) != XKEYS.CHILD_NUMBER:
            raise PathParseError(f"Child number must be {XKEYS.CHILD_NUMBER} bytes")
        return cls.from_int(int.from_bytes(data, "big"))

    @property
    def is_normal(self) -> bool:
        return not self.hardened

    def to_int(self) -> int:
        return self.index | HARDENED_OFFSET if self.hardened else self.index

    def to_bytes(self) -> bytes:
        return self.to_int().to_bytes(XKEYS.CHILD_NUMBER, "big")


@dataclass(frozen=True)
class DerivationPath:
    """
    An ordered sequence of child numbers, root to leaf. The empty path is the master key "m".
    """
    children: tuple[ChildNumber, ...] = ()

    def __post_init__(self):
        children = tuple(self.children)
        for child in children:
            if not isinstance(child, ChildNumber):
                raise PathParseError(f"Path elements must be ChildNumber, received {type(child).__name__}")
        object.__setattr__(self, "children", children)

    def __iter__(self) -> Iterator[ChildNumber]:
        return iter(self.children)

    def __len__(self):
        return len(self.children)

    def __getitem__(self, item):
        return self.children[item]

    def __str__(self):
        return "/".join(["m", *(str(child) for child in self.children)])

    @classmethod
    def parse(cls, path: str) -> "DerivationPath":
        """
        Parses a path like "m/44'/0'/0'/0/0". Hardened indices take a ', h or H suffix.
        """
        if not isinstance(path, str):
            raise PathParseError(f"Path must be a string, received {type(path).__name__}")

        parts = path.strip().split("/")
        if parts[0] != "m":
            raise PathParseError(f"Path must start with 'm': {path!r}")

        children = []
        for segment in parts[1:]:
            match = _SEGMENT.fullmatch(segment)
            if match is None:
                raise PathParseError(f"Malformed path segment {segment!r} in {path!r}")
            index, marker = match.groups()
            children.append(ChildNumber(int(index), hardened=bool(marker)))

        return cls(tuple(children))

    @classmethod
    def from_ints(cls, values) -> "DerivationPath":
        """From a sequence of 32-bit child numbers"""
        return cls(tuple(ChildNumber.from_int(v) for v in values))

    def extend(self, child: ChildNumber | int) -> "DerivationPath":
        if isinstance(child, int):
            child = ChildNumber.from_int(child)
        return DerivationPath(self.children + (child,))

    def to_ints(self) -> list[int]:
        return [child.to_int() for child in self.children]


class Purpose(Enum):
    BIP44 = 44
    BIP49 = 49
    BIP84 = 84
    BIP86 = 86

    def path(self, coin: int = 0, account: int = 0, change: int = 0, index: int = 0) -> DerivationPath:
        """m / purpose' / coin' / account' / change / index"""
        return DerivationPath((
            ChildNumber(self.value, hardened=True),
            ChildNumber(coin, hardened=True),
            ChildNumber(account, hardened=True),
            ChildNumber(change),
            ChildNumber(index),
        ))

    def account_path(self, coin: int = 0, account: int = 0) -> DerivationPath:
        """m / purpose' / coin' / account'"""
        return DerivationPath(self.path(coin, account).children[:3])
