"""Decompressing extracted archive files and splitting packed file sets."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from tm2kit import lzss
from tm2kit.binary import ByteReader
from tm2kit.errors import InvalidDecodeLengthError, InvalidFileNumError, UnpackError
from tm2kit.fsutil import get_base_path, remove_ext, write_file

PathLike = Union[str, "os.PathLike[str]"]

TM2_MAGIC = b"TIM2"
NAME_SIZE = 48


def has_tm2_header(data: bytes) -> bool:
    return bytes(data) == TM2_MAGIC


def tm2_header_offset(buffer: bytes) -> Optional[int]:
    """Where a compressed TIM2 stream starts, judged by where its magic shows through."""
    if len(buffer) >= 16:
        if has_tm2_header(buffer[5:9]):
            return 4
        if has_tm2_header(buffer[9:13]):
            return 8
    return None


def decode_buffer(buffer: bytes) -> bytes:
    """Decompress ``buffer`` if it holds a compressed TIM2 image, else return it as is."""
    offset = tm2_header_offset(buffer)
    if offset is None:
        return bytes(buffer)
    return lzss.decode(buffer[offset:])


@dataclass(frozen=True)
class FileEntry:
    offset: int
    size: int
    name: str


def read_header(buffer: bytes) -> list[FileEntry]:
    """Read the table of files at the start of a packed file set."""
    reader = ByteReader(buffer)
    count = reader.read_u16()
    entries = []
    for index in range(count):
        reader.skip(4 if index > 0 else 2)
        file_offset = reader.read_u32()
        size = reader.read_u32()
        file_num = reader.read_u32()
        name = reader.read_str(NAME_SIZE)
        if file_num != index:
            raise InvalidFileNumError(file_num, index)
        entries.append(FileEntry(offset=file_offset, size=size, name=name))
    return entries


def decode_entry(buffer: bytes, entry: FileEntry) -> bytes:
    end = entry.offset + entry.size
    if end > len(buffer):
        raise UnpackError(f"entry {entry.name!r} runs past the end of its archive")
    return decode_buffer(buffer[entry.offset:end])


def write_entry(path: PathLike, buffer: bytes, entry: FileEntry) -> Optional[Path]:
    """Decode ``entry`` and write it below ``path``; return the file written."""
    try:
        decoded = decode_entry(buffer, entry)
    except InvalidDecodeLengthError as exc:
        print(f"WARNING: mismatch decoding: {exc.offset} / {exc.length}\n\t{path}")
        return None

    target = Path(path) / entry.name
    if len(decoded) > 4 and has_tm2_header(decoded[:4]):
        target = target.with_suffix(".tm2")
    write_file(target, decoded)
    return target


def extract_files(path: PathLike, buffer: bytes) -> list[Path]:
    """Split a packed file set; several files go into a directory named after ``path``."""
    try:
        entries = read_header(buffer)
    except InvalidFileNumError as exc:
        print(f"WARNING: invalid file num: {exc.file_num} should be: {exc.index}\n\t{path}")
        return []

    if not entries:
        raise UnpackError(f"packed file set holds no files: {path}")

    if len(entries) > 1:
        directory = remove_ext(path)
        directory.mkdir(parents=True, exist_ok=True)
        written = (write_entry(directory, buffer, entry) for entry in entries)
    else:
        written = iter([write_entry(get_base_path(path), buffer, entries[0])])
    return [target for target in written if target is not None]


def process_file(path: PathLike, input_root: PathLike, output_root: PathLike) -> None:
    """Decode one extracted file into the mirrored location below ``output_root``."""
    path = Path(path)
    output_path = Path(output_root) / path.relative_to(input_root)
    buffer = path.read_bytes()
    output_path.parent.mkdir(parents=True, exist_ok=True)

    ext = path.suffix[1:]
    if ext == "lzs":
        extract_files(output_path, lzss.decode(buffer[4:]))
    elif ext == "tm2":
        write_file(output_path, decode_buffer(buffer))
    else:
        write_file(output_path, buffer)


def process(input_root: PathLike, output_root: PathLike) -> None:
    """Decode every file below ``input_root``."""
    print("Decoding files...")
    for path in sorted(Path(input_root).rglob("*")):
        if path.is_file():
            process_file(path, input_root, output_root)