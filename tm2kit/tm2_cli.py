"""Command that converts every TIM2 image in a directory to PNG."""

from __future__ import annotations

import argparse
import os
from pathlib import Path
from typing import Optional, Sequence, Union

from PIL import Image as PILImage

from tm2kit.frame import Frame
from tm2kit.image import load
from tm2kit.pixel import Pixel

PathLike = Union[str, "os.PathLike[str]"]

COLOR_KEY = Pixel(0, 255, 0, 255)


def write_png(path: PathLike, frame: Frame) -> Optional[Path]:
    """Save ``frame`` as a PNG beside ``path``; frames with mipmaps are skipped."""
    header = frame.header
    if header.has_mipmaps():
        print(f"MIPMAPS: {path}")
        return None
    width, height = header.width, header.height
    raw = frame.to_raw(COLOR_KEY)[: width * height * 4]
    output_path = Path(path).with_suffix(".png")
    PILImage.frombytes("RGBA", (width, height), raw).save(output_path, format="PNG")
    return output_path


def process_entry(path: PathLike) -> list[Path]:
    """Convert one image; several frames become ``<stem>_<i>.png`` each."""
    path = Path(path)
    print(f"Processing: {path}")
    image = load(path)

    if len(image.frames) > 1:
        targets = (
            (path.with_name(f"{path.stem}_{i}{path.suffix}"), frame)
            for i, frame in enumerate(image.frames)
        )
    else:
        targets = iter([(path, image.get_frame(0))])

    written = (write_png(target, frame) for target, frame in targets)
    return [target for target in written if target is not None]


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="tm2-png",
        description="Convert the .tm2 images in a directory to PNG files.",
    )
    parser.add_argument(
        "directory",
        nargs="?",
        default="../assets",
        help="directory holding .tm2 files (default: ../assets)",
    )
    args = parser.parse_args(argv)

    for entry in sorted(Path(args.directory).iterdir()):
        if not entry.is_file() or entry.suffix != ".tm2":
            continue
        try:
            process_entry(entry)
        except (ValueError, EOFError, IndexError, OSError) as exc:
            print(f"{exc!r}")
    return 0