"""Frames (pictures) stored inside a TIM2 image."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence, TypeVar

from tm2kit.binary import ByteReader
from tm2kit.errors import (
    InvalidBppError,
    InvalidBppFormatError,
    InvalidPixelSizeError,
    TrueColorAndPaletteError,
)
from tm2kit.pixel import Pixel, PixelFormat

SWIZZLE_WIDTH = 16
SWIZZLE_HEIGHT = 8
BASE_HEADER_SIZE = 48

_BPP_CODES = {1: 16, 2: 24, 3: 32, 4: 4, 5: 8}
_FORMATS = {
    4: PixelFormat.INDEXED4,
    8: PixelFormat.INDEXED8,
    16: PixelFormat.ABGR1555,
    24: PixelFormat.RGB888,
    32: PixelFormat.RGBA8888,
}

T = TypeVar("T")


@dataclass
class FrameHeader:
    total_size: int
    clut_size: int
    image_size: int
    header_size: int
    clut_color_count: int
    picture_format: int
    mipmap_count: int
    clut_format: int
    bpp: int
    width: int
    height: int
    gs_tex_0: int
    gs_tex_1: int
    gs_regs: int
    gs_tex_clut: int
    user_data: bytes = b""

    @classmethod
    def read(cls, reader: ByteReader) -> FrameHeader:
        total_size = reader.read_u32()
        clut_size = reader.read_u32()
        image_size = reader.read_u32()
        header_size = reader.read_u16()
        clut_color_count = reader.read_u16()
        picture_format = reader.read_u8()
        mipmap_count = reader.read_u8()
        clut_format = reader.read_u8()
        code = reader.read_u8()
        try:
            bpp = _BPP_CODES[code]
        except KeyError:
            raise InvalidBppFormatError(code) from None
        header = cls(
            total_size=total_size,
            clut_size=clut_size,
            image_size=image_size,
            header_size=header_size,
            clut_color_count=clut_color_count,
            picture_format=picture_format,
            mipmap_count=mipmap_count,
            clut_format=clut_format,
            bpp=bpp,
            width=reader.read_u16(),
            height=reader.read_u16(),
            gs_tex_0=reader.read_u64(),
            gs_tex_1=reader.read_u64(),
            gs_regs=reader.read_u32(),
            gs_tex_clut=reader.read_u32(),
        )
        user_data_size = header_size - BASE_HEADER_SIZE
        if user_data_size > 0:
            header.user_data = reader.read_slice(user_data_size)
        elif user_data_size < 0:
            raise ValueError(f"frame header size too small: {header_size}")

        if header.is_paletted() and header.bpp > 8:
            raise TrueColorAndPaletteError()
        return header

    def has_mipmaps(self) -> bool:
        return self.mipmap_count > 1

    def is_paletted(self) -> bool:
        return self.clut_size > 0

    def is_linear_palette(self) -> bool:
        return self.clut_format & 0x80 != 0

    def color_size(self) -> int:
        """Bytes per colour: of the pixels for true colour, of palette entries otherwise."""
        if self.bpp > 8:
            return self.bpp // 8
        return (self.clut_format & 0x07) + 1

    def pixel_format(self) -> PixelFormat:
        try:
            return _FORMATS[self.bpp]
        except KeyError:
            raise InvalidBppError(self.bpp) from None


def read_colors(buffer: bytes, color_size: int) -> list[Pixel]:
    """Decode consecutive ``color_size``-byte colour entries."""
    if color_size <= 0:
        raise InvalidPixelSizeError(color_size)
    reader = ByteReader(buffer)
    return [
        Pixel.from_bytes(reader.read_slice(color_size))
        for _ in range(0, len(buffer), color_size)
    ]


def linearize_palette(palette: Sequence[T]) -> list[T]:
    """Undo the block interleaving of a 256-colour palette, 32 entries at a time."""
    result = list(palette)
    order = (
        part * 32 + block * 8 + stripe * 16 + color
        for part in range(len(palette) // 32)
        for block in range(2)
        for stripe in range(2)
        for color in range(8)
    )
    for position, source in enumerate(order):
        result[position] = palette[source]
    return result


def unswizzle(buffer: Sequence[T], width: int, height: int) -> list[T]:
    """Reorder data stored in 16x8 tiles into row-major order."""
    default: object = Pixel() if buffer and isinstance(buffer[0], Pixel) else 0
    result = [default] * len(buffer)
    missing = object()
    values = iter(buffer)
    for y in range(0, height, SWIZZLE_HEIGHT):
        for x in range(0, width, SWIZZLE_WIDTH):
            for tile_y in range(y, y + SWIZZLE_HEIGHT):
                for tile_x in range(x, x + SWIZZLE_WIDTH):
                    value = next(values, missing)
                    if tile_x < width and tile_y < height and value is not missing:
                        result[tile_y * width + tile_x] = value
    return result  # type: ignore[return-value]


def _read_data(reader: ByteReader, header: FrameHeader) -> list:
    raw = reader.read_slice(header.image_size)
    if header.bpp == 4:
        # Each byte yields two indices, both taken from its low nibble.
        data: bytes | list[int] = [b & 0x0F for b in raw for _ in range(2)]
    else:
        data = raw

    if header.is_paletted():
        return unswizzle(list(data), header.width, header.height)
    colors = read_colors(bytes(data), header.bpp // 8)
    return unswizzle(colors, header.width, header.height)


def _read_palettes(reader: ByteReader, header: FrameHeader) -> list[list[Pixel]]:
    if not header.is_paletted():
        return []
    block = reader.read_slice(header.clut_size)
    color_size = header.color_size()
    size = header.clut_color_count * color_size
    palettes = []
    for i in range(header.clut_size // size):
        palette = read_colors(block[size * i:size * (i + 1)], color_size)
        if not header.is_linear_palette() and header.bpp == 8:
            palette = linearize_palette(palette)
        palettes.append(palette)
    return palettes


@dataclass
class Frame:
    """One picture: its header, pixel data or palette indices, and palettes."""

    header: FrameHeader
    data: list = field(default_factory=list)
    palettes: list[list[Pixel]] = field(default_factory=list)

    @classmethod
    def read(cls, reader: ByteReader) -> Frame:
        header = FrameHeader.read(reader)
        data = _read_data(reader, header)
        palettes = _read_palettes(reader, header)
        return cls(header=header, data=data, palettes=palettes)

    @property
    def indexed(self) -> bool:
        """Whether ``data`` holds palette indices rather than pixels."""
        return self.header.is_paletted()

    def pixels(self) -> list[Pixel]:
        """The frame's colours in row-major order, resolved through the first palette."""
        if self.indexed:
            palette = self.palettes[0]
            return [palette[index] for index in self.data]
        return list(self.data)

    def to_raw(self, color_key: Optional[Pixel] = None) -> bytes:
        """RGBA bytes; pixels equal to ``color_key`` become fully transparent."""
        out = bytearray()
        for pixel in self.pixels():
            alpha = 0 if color_key is not None and pixel == color_key else pixel.a
            out += bytes((pixel.r, pixel.g, pixel.b, alpha))
        return bytes(out)