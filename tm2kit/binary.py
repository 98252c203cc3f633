"""Little helpers for reading fixed-width values out of byte buffers."""

from __future__ import annotations

import struct


def printable_text(data: bytes) -> str:
    """Decode ``data`` as ASCII, turning unprintable bytes into spaces, and strip it."""
    return "".join(chr(b) if 32 <= b < 127 else " " for b in data).strip()


class ByteReader:
    """A cursor over a byte buffer that reads little-endian values in sequence."""

    def __init__(self, buffer: bytes, offset: int = 0) -> None:
        self.buffer = bytes(buffer)
        self.offset = offset

    def __len__(self) -> int:
        return len(self.buffer)

    @property
    def remaining(self) -> int:
        """Number of bytes left after the cursor."""
        return max(len(self.buffer) - self.offset, 0)

    def read_slice(self, length: int) -> bytes:
        """Return the next ``length`` bytes and advance past them."""
        if length < 0:
            raise ValueError(f"negative read length: {length}")
        end = self.offset + length
        if end > len(self.buffer):
            raise EOFError(
                f"cannot read {length} bytes at offset {self.offset}: "
                f"buffer holds {len(self.buffer)}"
            )
        chunk = self.buffer[self.offset:end]
        self.offset = end
        return chunk

    def skip(self, length: int) -> None:
        """Advance past ``length`` bytes."""
        self.read_slice(length)

    def _unpack(self, fmt: str) -> int:
        (value,) = struct.unpack(fmt, self.read_slice(struct.calcsize(fmt)))
        return value

    def read_u8(self) -> int:
        return self._unpack("<B")

    def read_u16(self) -> int:
        return self._unpack("<H")

    def read_u32(self) -> int:
        return self._unpack("<I")

    def read_u64(self) -> int:
        return self._unpack("<Q")

    def read_u32_be(self) -> int:
        return self._unpack(">I")

    def read_str(self, size: int) -> str:
        """Read a fixed-size text field, replacing unprintable bytes and trimming."""
        return printable_text(self.read_slice(size))