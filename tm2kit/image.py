"""Reading whole TIM2 (.tm2) image files."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Union

from tm2kit.binary import ByteReader
from tm2kit.errors import InvalidAlignmentError, InvalidIdentifierError
from tm2kit.frame import Frame

IDENT = 0x54494D32


@dataclass
class Image:
    """A TIM2 image: format version, alignment flag and its frames."""

    version: int
    align: int
    frames: list[Frame] = field(default_factory=list)

    @classmethod
    def read(cls, reader: ByteReader) -> Image:
        identifier = reader.read_u32_be()
        version = reader.read_u8()
        align = reader.read_u8()
        count = reader.read_u16()
        reader.skip(8)

        if identifier != IDENT:
            raise InvalidIdentifierError(identifier)
        if align not in (0x00, 0x01):
            raise InvalidAlignmentError(align)

        frames = [Frame.read(reader) for _ in range(count)]
        return cls(version=version, align=align, frames=frames)

    def get_frame(self, index: int) -> Frame:
        return self.frames[index]


def from_buffer(buffer: bytes) -> Image:
    """Parse a TIM2 image held in memory."""
    return Image.read(ByteReader(buffer))


def load(path: Union[str, os.PathLike]) -> Image:
    """Read and parse a TIM2 image file."""
    with open(path, "rb") as fh:
        return from_buffer(fh.read())