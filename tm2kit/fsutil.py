"""Filesystem helpers used while unpacking archives."""

from __future__ import annotations

import os
import shutil
from pathlib import Path
from typing import Union

from tm2kit.errors import NoBasePathError

PathLike = Union[str, "os.PathLike[str]"]


def get_base_path(path: PathLike) -> Path:
    """Return ``path`` with its file name removed from the text of the path."""
    path = Path(path)
    name = path.name
    if name in ("", ".", ".."):
        raise NoBasePathError()
    return Path(str(path).replace(name, ""))


def remove_ext(path: PathLike) -> Path:
    """Return ``path`` with the extension of its final component dropped."""
    return get_base_path(path) / Path(path).stem


def write_file(path: PathLike, buffer: bytes) -> None:
    """Create or truncate ``path`` and write ``buffer`` to it."""
    Path(path).write_bytes(bytes(buffer))


def recreate_dir(path: PathLike) -> None:
    """Remove ``path`` with everything below it, if present, and create it empty."""
    path = Path(path)
    if path.is_dir():
        shutil.rmtree(path)
    path.mkdir()