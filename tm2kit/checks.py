"""Hashing the files extracted from the data archive."""

from __future__ import annotations

import hashlib
import os
from pathlib import Path
from typing import Iterable, Union

from tm2kit.metadata import DirectoryNode, Metadata, Node

PathLike = Union[str, "os.PathLike[str]"]


def hash_files(nodes: Iterable[Node], path: PathLike) -> dict[Path, str]:
    """SHA-256 hex digests of every extracted file in ``nodes``, keyed by path."""
    path = Path(path)
    digests: dict[Path, str] = {}
    for node in nodes:
        if isinstance(node, DirectoryNode):
            digests.update(hash_files(node.children, path / node.name))
        else:
            target = path / node.name
            digests[target] = hashlib.sha256(target.read_bytes()).hexdigest()
    return digests


def process(metadata_path: PathLike, root: PathLike) -> dict[Path, str]:
    """Hash every file the archive table lists, as extracted below ``root``."""
    print("Checking extracted files...")
    metadata = Metadata.load(metadata_path)
    return hash_files(metadata.root(), root)