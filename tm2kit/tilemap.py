"""Tile maps: cells, triggers, vertex geometry and the texture atlas they use."""

from __future__ import annotations

import enum
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Sequence, Union

from tm2kit.binary import ByteReader
from tm2kit.errors import InvalidCellKindError
from tm2kit.image import load as load_image
from tm2kit.pixel import Pixel

PathLike = Union[str, "os.PathLike[str]"]

TEXTURE_SIZE = 512
ATLAS_WIDTH = 1024
TEXEL = 1.0 / ATLAS_WIDTH
TILE_SIZE = 32.0
TILE_MAG = TEXEL * TILE_SIZE
INDEX_OFFSETS = (0, 1, 2, 0, 2, 3)
COLOR_KEY = Pixel(0, 255, 0, 255)

POS = (
    (TILE_SIZE, 0.0),
    (0.0, 0.0),
    (0.0, TILE_SIZE),
    (TILE_SIZE, TILE_SIZE),
)

UV = (
    (TILE_MAG, 0.0),
    (0.0, 0.0),
    (0.0, TILE_MAG),
    (TILE_MAG, TILE_MAG),
)


class CellKind(enum.Enum):
    BASE = 0
    VAR = 1
    ANM = 2

    @classmethod
    def from_index(cls, index: int) -> CellKind:
        try:
            return cls(index)
        except ValueError:
            raise InvalidCellKindError(index) from None

    def suffix(self) -> str:
        """File name suffix of the texture holding this kind's tiles."""
        return self.name.lower()

    def atlas_offset(self) -> tuple[float, float]:
        """Where this kind's texture sits in the atlas, in texture coordinates."""
        mag = TEXTURE_SIZE * TEXEL
        if self is CellKind.VAR:
            return (mag, 0.0)
        if self is CellKind.ANM:
            return (0.0, mag)
        return (0.0, 0.0)


class TriggerKind(enum.Enum):
    PASSABLE = "passable"
    BLOCKER = "blocker"
    UPPER_LOWER_DELTA = "upper_lower_delta"
    LOWER_UPPER_DELTA = "lower_upper_delta"
    HIDDEN = "hidden"
    BRIDGE = "bridge"
    DAMAGE = "damage"
    BOTTOM_TRANSPARENT = "bottom_transparent"
    BOTTOM_HIDDEN = "bottom_hidden"
    TREASURE = "treasure"
    EXIT = "exit"
    UNKNOWN = "unknown"


_FIXED_TRIGGERS = {
    0x00: TriggerKind.PASSABLE,
    0x01: TriggerKind.BLOCKER,
    0x02: TriggerKind.UPPER_LOWER_DELTA,
    0x03: TriggerKind.LOWER_UPPER_DELTA,
    0x04: TriggerKind.HIDDEN,
    0x05: TriggerKind.BRIDGE,
    0x06: TriggerKind.DAMAGE,
    0x10: TriggerKind.BOTTOM_TRANSPARENT,
    0x11: TriggerKind.BOTTOM_HIDDEN,
}


@dataclass(frozen=True)
class Trigger:
    """What stepping on a cell does; ``value`` is the code or the kind's payload."""

    kind: TriggerKind
    value: int

    @classmethod
    def from_raw(cls, value: int) -> Trigger:
        if value in _FIXED_TRIGGERS:
            return cls(_FIXED_TRIGGERS[value], value)
        if 0x20 <= value <= 0x3F:
            return cls(TriggerKind.TREASURE, value & 0x3F)
        if 0x40 <= value <= 0x5F:
            return cls(TriggerKind.EXIT, value & 0x3F)
        return cls(TriggerKind.UNKNOWN, value)

    def to_raw(self) -> int:
        return self.value


@dataclass(frozen=True)
class Cell:
    kind: CellKind
    trigger: Trigger
    tile_index: int
    position: tuple[float, float]

    def tile_position(self) -> tuple[float, float]:
        """Column and row of the cell's tile within its 16-tile-wide texture."""
        return (float(self.tile_index % 16), float(self.tile_index // 16))


@dataclass
class TextureVertex:
    x: float
    y: float
    z: float
    u: float
    v: float


def _has_vertices(cell: Cell, animated: bool) -> bool:
    return (cell.kind is CellKind.ANM) == animated


def _build_vertex(
    cell: Cell, offset_z: float, corner: int, tile_pos: tuple[float, float]
) -> TextureVertex:
    atlas_x, atlas_y = cell.kind.atlas_offset()
    pos_x, pos_y = POS[corner]
    uv_x, uv_y = UV[corner]
    return TextureVertex(
        x=pos_x + cell.position[0] * TILE_SIZE,
        y=pos_y + cell.position[1] * TILE_SIZE,
        z=offset_z,
        u=uv_x + tile_pos[0] * TILE_MAG + atlas_x,
        v=uv_y + tile_pos[1] * TILE_MAG + atlas_y,
    )


def build_vertices(cells: Sequence[Cell], index: int, animated: bool) -> list[TextureVertex]:
    """Four corner vertices for each animated (or each still) cell of a layer."""
    offset_z = index * -2.0
    return [
        _build_vertex(cell, offset_z, corner, cell.tile_position())
        for cell in cells
        if _has_vertices(cell, animated)
        for corner in range(4)
    ]


def build_indices(count: int) -> list[int]:
    """Two triangles per quad for ``count`` quads."""
    return [offset + i * 4 for i in range(count) for offset in INDEX_OFFSETS]


class Layer:
    """One layer of a tile map with its still and animated geometry."""

    def __init__(self, cells: Sequence[Cell], index: int) -> None:
        self.cells = list(cells)
        self.index = index
        self.static_vertices = build_vertices(self.cells, index, False)
        self.animated_vertices = build_vertices(self.cells, index, True)
        self.static_indices = build_indices(len(self.cells)) if self.static_vertices else None
        self.animated_indices = (
            build_indices(len(self.cells)) if self.animated_vertices else None
        )

    def update(self, frame_index: int) -> None:
        """Shift animated cells' texture coordinates to animation frame ``frame_index``."""
        if not self.animated_vertices:
            return
        x_atlas = CellKind.ANM.atlas_offset()[0]
        animated = (cell for cell in self.cells if cell.kind is CellKind.ANM)
        for i, cell in enumerate(animated):
            x_position = cell.tile_position()[0] + frame_index
            for corner, (uv_x, _) in enumerate(UV):
                self.animated_vertices[i * 4 + corner].u = uv_x + x_position * TILE_MAG + x_atlas


def _filter_layer_cells(cells: list[Cell]) -> list[Cell]:
    return [cell for cell in cells if cell.kind is CellKind.ANM or cell.tile_index > 0]


def build_cells(buffer: bytes, width: int, height: int) -> tuple[list[Cell], list[Cell]]:
    """Read the lower and upper layer cells, dropping empty still cells."""
    count = width * height
    upper_offset = count * 2
    trigger_offset = upper_offset * 2
    lower: list[Cell] = []
    upper: list[Cell] = []
    for i in range(count):
        position = (float(i % width), float(i // width))
        lower.append(
            Cell(
                kind=CellKind.from_index(buffer[i * 2 + 1]),
                trigger=Trigger.from_raw(buffer[i * 2 + trigger_offset]),
                tile_index=buffer[i * 2],
                position=position,
            )
        )
        upper.append(
            Cell(
                kind=CellKind.from_index(buffer[i * 2 + 1 + upper_offset]),
                trigger=Trigger.from_raw(buffer[i * 2 + 1 + trigger_offset]),
                tile_index=buffer[i * 2 + upper_offset],
                position=position,
            )
        )
    return _filter_layer_cells(lower), _filter_layer_cells(upper)


@dataclass
class Tilemap:
    """A two-layer tile map with its collision flags and, once loaded, its atlas."""

    width: int
    height: int
    layers: tuple[Layer, Layer]
    collision: bytes
    frame_index: int = 0
    atlas: Optional[bytes] = field(default=None, repr=False)

    @classmethod
    def from_buffers(cls, map_buffer: bytes, collision_buffer: bytes) -> Tilemap:
        reader = ByteReader(map_buffer)
        width = reader.read_u16()
        height = reader.read_u16()
        data = reader.read_slice(width * height * 6)
        lower, upper = build_cells(data, width, height)
        return cls(
            width=width,
            height=height,
            layers=(Layer(lower, 0), Layer(upper, 1)),
            collision=bytes(collision_buffer),
        )

    def px_width(self) -> float:
        return self.width * TILE_SIZE

    def px_height(self) -> float:
        return self.height * TILE_SIZE

    def update(self, elapsed_time: float) -> bool:
        """Advance the animation to the frame for ``elapsed_time``; report a change."""
        current = int(elapsed_time * 4.0) % 4
        if current == self.frame_index:
            return False
        self.frame_index = current
        for layer in self.layers:
            layer.update(current)
        return True

    def format_collision(self, layer_index: int) -> str:
        """The layer's collision flags as rows of two-digit hex values."""
        layer_offset = (len(self.collision) // 2) * layer_index
        return "".join(
            "".join(
                f"{self.collision[y * self.width + x + layer_offset]:02x} "
                for x in range(self.width)
            )
            + "\n"
            for y in range(self.height)
        )

    def format_triggers(self, layer_index: int) -> str:
        """The layer's trigger codes as rows of two-digit hex values."""
        by_position = {
            (int(cell.position[0]), int(cell.position[1])): cell.trigger.to_raw()
            for cell in reversed(self.layers[layer_index].cells)
        }
        return "".join(
            "".join(f"{by_position.get((x, y), 0):02x} " for x in range(self.width)) + "\n"
            for y in range(self.height)
        )


def load_frame(path: PathLike, name: str, kind: CellKind) -> bytes:
    """RGBA bytes of the first frame of ``<name>_<kind>.tm2``, colour key applied."""
    image = load_image(Path(path) / f"{name}_{kind.suffix()}.tm2")
    return image.get_frame(0).to_raw(COLOR_KEY)


def build_atlas(path: PathLike, name: str) -> bytes:
    """Compose the base, var and anm textures into one RGBA atlas."""
    size = ATLAS_WIDTH
    atlas = bytearray(size * size * 4)
    row_bytes = TEXTURE_SIZE * 4
    for kind in CellKind:
        data = load_frame(path, name, kind)
        if len(data) < row_bytes * TEXTURE_SIZE:
            raise ValueError(
                f"texture {name}_{kind.suffix()} is smaller than "
                f"{TEXTURE_SIZE}x{TEXTURE_SIZE}"
            )
        offset_x, offset_y = (int(v / TEXEL) for v in kind.atlas_offset())
        for row in range(TEXTURE_SIZE):
            target = ((offset_y + row) * size + offset_x) * 4
            atlas[target:target + row_bytes] = data[row * row_bytes:(row + 1) * row_bytes]
    return bytes(atlas)


def load(path: PathLike, map_name: str, set_name: str) -> Tilemap:
    """Load a map (``.cn2``), its collision flags (``_hit.cns``) and its tile set."""
    path = Path(path)
    atlas = build_atlas(path, set_name)
    map_buffer = (path / f"{map_name}.cn2").read_bytes()
    collision_buffer = (path / f"{map_name}_hit.cns").read_bytes()
    tilemap = Tilemap.from_buffers(map_buffer, collision_buffer)
    tilemap.atlas = atlas
    return tilemap