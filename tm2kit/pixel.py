"""RGBA pixels and the pixel formats found in TIM2 images."""

from __future__ import annotations

import enum
from dataclasses import dataclass

from tm2kit.errors import InvalidPixelSizeError


class PixelFormat(enum.Enum):
    INDEXED4 = "indexed4"
    INDEXED8 = "indexed8"
    ABGR1555 = "abgr1555"
    RGB888 = "rgb888"
    RGBA8888 = "rgba8888"


def _expand5(value: int) -> int:
    return int(value / 31.0 * 255.0)


@dataclass(frozen=True)
class Pixel:
    """An 8-bit-per-channel RGBA colour; opaque white by default."""

    r: int = 255
    g: int = 255
    b: int = 255
    a: int = 255

    @classmethod
    def from_bytes(cls, buf: bytes) -> Pixel:
        """Decode a 2-, 3- or 4-byte colour entry."""
        size = len(buf)
        if size == 2:
            raw = (buf[0] << 8) | buf[1]
            return cls(
                r=_expand5(raw & 0x1F),
                g=_expand5((raw >> 5) & 0x1F),
                b=_expand5((raw >> 10) & 0x1F),
                a=255 if raw >> 15 == 1 else 0,
            )
        if size == 3:
            return cls(buf[0], buf[1], buf[2], 255)
        if size == 4:
            return cls(buf[0], buf[1], buf[2], buf[3])
        raise InvalidPixelSizeError(size)

    def __str__(self) -> str:
        return f"px<{self.r}  {self.g}  {self.b}  {self.a}>"