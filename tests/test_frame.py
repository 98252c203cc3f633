import struct

import pytest

from tm2kit.binary import ByteReader
from tm2kit.errors import (
    InvalidBppFormatError,
    InvalidPixelSizeError,
    TrueColorAndPaletteError,
)
from tm2kit.frame import (
    Frame,
    FrameHeader,
    linearize_palette,
    read_colors,
    unswizzle,
)
from tm2kit.pixel import Pixel, PixelFormat

W, H = 16, 8


def frame_bytes(image, *, bpp_code, width=W, height=H, clut=b"", clut_count=0,
                clut_format=0, mipmaps=1, user_data=b""):
    header_size = 48 + len(user_data)
    total = header_size + len(image) + len(clut)
    header = struct.pack(
        "<IIIHHBBBBHHQQII", total, len(clut), len(image), header_size,
        clut_count, 0, mipmaps, clut_format, bpp_code, width, height, 0, 0, 0, 0,
    )
    return header + user_data + image + clut


def rgba(pixels):
    return b"".join(bytes((p.r, p.g, p.b, p.a)) for p in pixels)


def sample_pixels():
    return [Pixel(i, 255 - i, i // 2, 255) for i in range(W * H)]


def test_rgba_frame_round_trip():
    pixels = sample_pixels()
    frame = Frame.read(ByteReader(frame_bytes(rgba(pixels), bpp_code=3)))
    assert frame.header.width == W and frame.header.height == H
    assert frame.header.pixel_format() == PixelFormat.RGBA8888
    assert not frame.indexed
    assert frame.pixels() == pixels
    assert frame.to_raw(None) == rgba(pixels)


def test_color_key_clears_alpha():
    pixels = sample_pixels()
    key = pixels[3]
    raw = Frame.read(ByteReader(frame_bytes(rgba(pixels), bpp_code=3))).to_raw(key)
    assert raw[3 * 4 + 3] == 0
    assert raw[4 * 4 + 3] == pixels[4].a
    assert raw[3 * 4:3 * 4 + 3] == bytes((key.r, key.g, key.b))


def test_rgb_frame_is_opaque():
    pixels = sample_pixels()
    image = b"".join(bytes((p.r, p.g, p.b)) for p in pixels)
    frame = Frame.read(ByteReader(frame_bytes(image, bpp_code=2)))
    assert frame.pixels() == pixels


def test_linear_palette_frame():
    palette = [Pixel(10, 0, 0, 255), Pixel(0, 20, 0, 255),
               Pixel(0, 0, 30, 255), Pixel(1, 2, 3, 4)]
    indices = bytes(i % 4 for i in range(W * H))
    data = frame_bytes(indices, bpp_code=5, clut=rgba(palette), clut_count=4,
                       clut_format=0x80 | 3)
    frame = Frame.read(ByteReader(data))
    assert frame.indexed
    assert frame.header.color_size() == 4
    assert frame.palettes == [palette]
    assert frame.pixels() == [palette[i] for i in indices]


def test_four_bit_frame_uses_low_nibble():
    palette = [Pixel(i, i, i, 255) for i in range(16)]
    image = bytes([0x21] * (W * H // 2))
    data = frame_bytes(image, bpp_code=4, clut=rgba(palette), clut_count=16,
                       clut_format=3)
    frame = Frame.read(ByteReader(data))
    assert frame.header.pixel_format() == PixelFormat.INDEXED4
    assert frame.pixels() == [palette[1]] * (W * H)


def test_user_data_and_mipmaps():
    data = frame_bytes(rgba(sample_pixels()), bpp_code=3, mipmaps=2, user_data=b"xyzw")
    reader = ByteReader(data)
    frame = Frame.read(reader)
    assert frame.header.user_data == b"xyzw"
    assert frame.header.has_mipmaps()
    assert reader.offset == len(data)


def test_invalid_bpp_code():
    with pytest.raises(InvalidBppFormatError) as info:
        FrameHeader.read(ByteReader(frame_bytes(b"", bpp_code=9)))
    assert info.value.value == 9


def test_palette_with_true_color_rejected():
    with pytest.raises(TrueColorAndPaletteError):
        FrameHeader.read(ByteReader(frame_bytes(b"", bpp_code=3, clut=b"\0" * 4)))


def test_unpaletted_eight_bit_rejected():
    with pytest.raises(InvalidPixelSizeError):
        Frame.read(ByteReader(frame_bytes(bytes(W * H), bpp_code=5)))


def test_header_pixel_format_sixteen_bit():
    header = FrameHeader.read(ByteReader(frame_bytes(b"", bpp_code=1)))
    assert header.pixel_format() == PixelFormat.ABGR1555
    assert header.color_size() == 2


def test_read_colors():
    buf = bytes([1, 2, 3, 4, 5, 6])
    assert read_colors(buf, 3) == [Pixel(1, 2, 3), Pixel(4, 5, 6)]
    with pytest.raises(InvalidPixelSizeError):
        read_colors(buf, 1)


def test_unswizzle_single_tile_is_identity():
    data = list(range(W * H))
    assert unswizzle(data, W, H) == data


def test_unswizzle_two_tiles():
    data = list(range(2 * W * H))
    result = unswizzle(data, 2 * W, H)
    assert sorted(result) == data
    assert result[W] == data[W * H]
    assert result[2 * W] == data[W]


def test_unswizzle_short_pixel_buffer_keeps_defaults():
    data = [Pixel(0, 0, 0, 0)] * 4
    result = unswizzle(data, 2, 2)
    assert result == [Pixel(0, 0, 0, 0), Pixel(0, 0, 0, 0), Pixel(), Pixel()]


def test_linearize_palette_swaps_middle_stripes():
    palette = list(range(40))
    result = linearize_palette(palette)
    assert result[0:8] == palette[0:8]
    assert result[8:16] == palette[16:24]
    assert result[16:24] == palette[8:16]
    assert result[24:32] == palette[24:32]
    assert result[32:] == palette[32:]
    assert palette == list(range(40))