"""Collecting the unique 32x32 tiles of a tile set into one PNG sheet."""

from __future__ import annotations

import hashlib
import math
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Union

from PIL import Image as PILImage

from tm2kit.image import load
from tm2kit.pixel import Pixel

PathLike = Union[str, "os.PathLike[str]"]

TILE_SIZE = 32
SECTION_SIZE = TILE_SIZE * TILE_SIZE * 4
COLOR_KEY = Pixel(0, 255, 0, 255)


@dataclass
class TileImage:
    """An RGBA picture: its size in pixels and its raw bytes."""

    width: int
    height: int
    raw: bytes


def get_sub_section(x_tile: int, y_tile: int, width: int, buffer: bytes) -> bytes:
    """Copy the RGBA bytes of one tile out of an image ``width`` pixels wide."""
    x_start = x_tile * TILE_SIZE
    y_start = y_tile * TILE_SIZE
    row_bytes = TILE_SIZE * 4
    section = bytearray()
    for y in range(TILE_SIZE):
        start = ((y + y_start) * width + x_start) * 4
        row = buffer[start:start + row_bytes]
        if len(row) != row_bytes:
            raise IndexError(f"tile ({x_tile}, {y_tile}) lies outside the image")
        section += row
    return bytes(section)


def tile_hash(section: bytes) -> str:
    """SHA-256 hex digest identifying a tile's pixels."""
    return hashlib.sha256(section).hexdigest()


def filter_directories(path: PathLike) -> list[Path]:
    """Map directories below ``path``: named CN_*, neither *_char nor holding _d_."""
    path = Path(path)
    return [
        path / entry.name
        for entry in sorted(path.iterdir())
        if entry.is_dir()
        and entry.name.startswith("CN_")
        and not entry.name.endswith("_char")
        and "_d_" not in entry.name
    ]


def filter_files(path: PathLike, name: str) -> list[Path]:
    """Images in ``path`` ending in ``_<name>.tm2``, leaving out those named dtown_*."""
    path = Path(path)
    suffix = f"_{name}.tm2"
    return [
        path / entry.name
        for entry in sorted(path.iterdir())
        if entry.name.endswith(suffix) and not entry.name.startswith("dtown_")
    ]


def build_tile_map(name: str, directories: Iterable[PathLike]) -> dict[str, bytes]:
    """Every distinct tile of the ``name`` images in ``directories``, keyed by hash."""
    tiles: dict[str, bytes] = {}
    for directory in directories:
        for file_path in filter_files(directory, name):
            for frame in load(file_path).frames:
                width = frame.header.width
                height = frame.header.height
                raw = frame.to_raw(COLOR_KEY)
                for y in range(height // TILE_SIZE):
                    for x in range(width // TILE_SIZE):
                        section = get_sub_section(x, y, width, raw)
                        tiles.setdefault(tile_hash(section), section)
    return tiles


def build_image(tiles: dict[str, bytes]) -> TileImage:
    """Lay the tiles out in a near-square grid, left to right and top to bottom."""
    count = len(tiles)
    if count == 0:
        return TileImage(0, 0, b"")
    columns = math.ceil(math.sqrt(count))
    rows = math.ceil(count / columns)
    pixel_width = columns * TILE_SIZE
    raw = bytearray(columns * rows * SECTION_SIZE)
    row_bytes = TILE_SIZE * 4

    for i, section in enumerate(tiles.values()):
        x_start = (i % columns) * TILE_SIZE
        y_start = (i // columns) * TILE_SIZE
        for y in range(TILE_SIZE):
            target = ((y + y_start) * pixel_width + x_start) * 4
            raw[target:target + row_bytes] = section[y * row_bytes:(y + 1) * row_bytes]

    return TileImage(width=pixel_width, height=rows * TILE_SIZE, raw=bytes(raw))


def process(input_path: PathLike, output_path: PathLike, name: str) -> Path:
    """Write ``tilemap_<name>.png`` holding every tile of the named tile set."""
    output_filename = f"tilemap_{name}.png"
    target = Path(output_path) / output_filename
    source = Path(input_path) / "output" / "data"

    print(f"output_filename: {output_filename}")
    print(f"output_path: {target}")
    print(f"input_path: {source}")

    tiles = build_tile_map(name, filter_directories(source))
    sheet = build_image(tiles)
    print(f"hashed {len(tiles)} tiles")

    if sheet.width == 0 or sheet.height == 0:
        raise ValueError(f"no tiles found for tile set {name!r}")
    PILImage.frombytes("RGBA", (sheet.width, sheet.height), sheet.raw).save(
        target, format="PNG"
    )
    return target