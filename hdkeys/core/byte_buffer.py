"""
The ByteBuffer class - an append-only byte buffer with a fixed capacity
"""
from hdkeys.core.exceptions import BufferOverflowError

__all__ = ["ByteBuffer"]


class ByteBuffer:
    """
    Collects bytes up to a fixed capacity. Writing past the capacity raises a BufferOverflowError and leaves the
    buffer unchanged.
    """
    __slots__ = ("capacity", "_data")

    def __init__(self, capacity: int):
        if capacity < 0:
            raise ValueError("Buffer capacity cannot be negative")
        self.capacity = capacity
        self._data = bytearray()

    def __len__(self):
        return len(self._data)

    def __bytes__(self):
        return bytes(self._data)

    def __repr__(self):
        return f"ByteBuffer(capacity={self.capacity}, length={len(self._data)})"

    @property
    def remaining(self) -> int:
        return self.capacity - len(self._data)

    def push(self, byte: int) -> "ByteBuffer":
        if not 0 <= byte <= 0xff:
            raise ValueError(f"Byte value out of range: {byte}")
        if self.remaining < 1:
            raise BufferOverflowError(f"Buffer full. Capacity: {self.capacity}")
        self._data.append(byte)
        return self

    def extend(self, data: bytes) -> "ByteBuffer":
        if len(data) > self.remaining:
            raise BufferOverflowError(
                f"Cannot write {len(data)} bytes to buffer with {self.remaining} bytes remaining"
            )
        self._data.extend(data)
        return self

    def to_bytes(self) -> bytes:
        return bytes(self._data)
