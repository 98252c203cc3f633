"""Copying the files listed in the archive table out of the data archive."""

from __future__ import annotations

import os
from pathlib import Path
from typing import BinaryIO, Iterable, Union

from tm2kit.fsutil import write_file
from tm2kit.metadata import DirectoryNode, Metadata, Node

PathLike = Union[str, "os.PathLike[str]"]


def extract_nodes(archive: BinaryIO, nodes: Iterable[Node], path: PathLike) -> None:
    """Write every file in ``nodes`` below ``path``, reading its bytes from ``archive``."""
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    for node in nodes:
        if isinstance(node, DirectoryNode):
            extract_nodes(archive, node.children, path / node.name)
        else:
            archive.seek(node.offset)
            data = archive.read(node.size)
            if len(data) != node.size:
                raise EOFError(
                    f"archive ends before {node.name!r} ({node.size} bytes at {node.offset})"
                )
            write_file(path / node.name, data)


def process(metadata_path: PathLike, archive_path: PathLike, output_root: PathLike) -> None:
    """Extract the whole archive described by ``metadata_path`` into ``output_root``."""
    print(f"Extracting from {Path(archive_path).name}...")
    metadata = Metadata.load(metadata_path)
    with open(archive_path, "rb") as archive:
        extract_nodes(archive, metadata.root(), output_root)