"""Command that unpacks the game's data archives into files and PNG images."""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path
from typing import Optional, Sequence, Union

from tm2kit import checks, decode, extract, png

PathLike = Union[str, "os.PathLike[str]"]

METADATA_NAME = "PAC0.BIN"
ARCHIVE_NAME = "PAC1.BIN"


def run(base_dir: PathLike) -> None:
    """Extract, check, decode and convert the archives held in ``base_dir``."""
    base = Path(base_dir)
    metadata_path = base / METADATA_NAME
    extracted = base / "extracted"
    decoded = base / "decoded"

    extract.process(metadata_path, base / ARCHIVE_NAME, extracted)
    checks.process(metadata_path, extracted)
    decode.process(extracted, decoded)
    png.process(decoded, base / "images")


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="tm2-unpack",
        description="Unpack PAC0.BIN/PAC1.BIN into extracted, decoded and PNG files.",
    )
    parser.add_argument(
        "base_dir",
        nargs="?",
        default="../iso",
        help="directory holding PAC0.BIN and PAC1.BIN (default: ../iso)",
    )
    args = parser.parse_args(argv)
    try:
        run(args.base_dir)
    except (ValueError, EOFError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0