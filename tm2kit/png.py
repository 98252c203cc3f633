"""Converting decoded TIM2 images to PNG files."""

from __future__ import annotations

import os
import shutil
from pathlib import Path
from typing import Optional, Union

from PIL import Image as PILImage

from tm2kit.image import from_buffer
from tm2kit.pixel import Pixel

PathLike = Union[str, "os.PathLike[str]"]

COLOR_KEY = Pixel(0, 255, 0, 255)
ERRORS_DIR = "errors"


def _recreate_tree(path: Path) -> None:
    if path.is_dir():
        shutil.rmtree(path)
    path.mkdir(parents=True)


def write_png(path: PathLike, buffer: bytes) -> Optional[Path]:
    """Save the first frame of a TIM2 image next to ``path`` as PNG.

    Frames with mipmaps are skipped and give ``None``.
    """
    frame = from_buffer(buffer).get_frame(0)
    header = frame.header
    if header.has_mipmaps():
        return None
    width, height = header.width, header.height
    raw = frame.to_raw(COLOR_KEY)[: width * height * 4]
    output_path = Path(path).with_suffix(".png")
    PILImage.frombytes("RGBA", (width, height), raw).save(output_path, format="PNG")
    return output_path


def has_tm2_extension(path: PathLike) -> bool:
    return Path(path).suffix == ".tm2"


def process_entry(path: PathLike, decoded_root: PathLike, output_root: PathLike) -> bool:
    """Convert one image; on failure copy it to the errors directory and return False."""
    path = Path(path)
    output_root = Path(output_root)
    output_path = output_root / path.relative_to(decoded_root)
    buffer = path.read_bytes()
    output_path.parent.mkdir(parents=True, exist_ok=True)

    try:
        write_png(output_path, buffer)
    except (ValueError, EOFError, IndexError, OSError) as exc:
        print(f"WARNING: unable write PNG: {path}\n{exc!r}")
        errors = output_root / ERRORS_DIR
        errors.mkdir(parents=True, exist_ok=True)
        (errors / output_path.name).write_bytes(buffer)
        return False
    return True


def process(decoded_root: PathLike, output_root: PathLike) -> list[Path]:
    """Convert every .tm2 file below ``decoded_root``; return those that failed."""
    print("Writing PNG files...")
    output_root = Path(output_root)
    _recreate_tree(output_root)
    _recreate_tree(output_root / ERRORS_DIR)

    failed = []
    for path in sorted(Path(decoded_root).rglob("*")):
        if path.is_file() and has_tm2_extension(path):
            if not process_entry(path, decoded_root, output_root):
                failed.append(path)
    return failed