import pytest

from tm2kit.errors import InvalidPixelSizeError
from tm2kit.pixel import Pixel


def test_default_is_opaque_white():
    assert Pixel() == Pixel(255, 255, 255, 255)


def test_rgba_bytes():
    assert Pixel.from_bytes(bytes([1, 2, 3, 4])) == Pixel(1, 2, 3, 4)


def test_rgb_bytes_are_opaque():
    assert Pixel.from_bytes(bytes([9, 8, 7])) == Pixel(9, 8, 7, 255)


@pytest.mark.parametrize(
    "buf, expected",
    [
        (bytes([0x00, 0x1F]), Pixel(255, 0, 0, 0)),
        (bytes([0x03, 0xE0]), Pixel(0, 255, 0, 0)),
        (bytes([0x7C, 0x00]), Pixel(0, 0, 255, 0)),
        (bytes([0x80, 0x00]), Pixel(0, 0, 0, 255)),
        (bytes([0xFF, 0xFF]), Pixel(255, 255, 255, 255)),
    ],
)
def test_sixteen_bit_channels(buf, expected):
    assert Pixel.from_bytes(buf) == expected


@pytest.mark.parametrize("size", [0, 1, 5])
def test_invalid_size(size):
    with pytest.raises(InvalidPixelSizeError) as info:
        Pixel.from_bytes(bytes(size))
    assert info.value.size == size


def test_str():
    assert str(Pixel(1, 2, 3, 4)) == "px<1  2  3  4>"


def test_pixels_are_hashable_and_compare_by_value():
    assert {Pixel(1, 2, 3, 4), Pixel(1, 2, 3, 4)} == {Pixel(1, 2, 3, 4)}