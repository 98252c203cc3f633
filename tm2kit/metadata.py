"""The directory table of the game's data archive."""

from __future__ import annotations

import enum
import os
from dataclasses import dataclass, field
from typing import Iterator, Union

from tm2kit.binary import ByteReader
from tm2kit.errors import InvalidNodeKindError, UnpackError

CHECKSUM_SIZE = 32
ROOT_NAME = "data"


class InfoKind(enum.Enum):
    DIRECTORY = 0
    FILE = 1


@dataclass(frozen=True)
class Header:
    record_count: int
    file_count: int
    name_table_size: int
    archive_total_size: int

    @classmethod
    def read(cls, reader: ByteReader) -> Header:
        header = cls(
            record_count=reader.read_u32(),
            file_count=reader.read_u32(),
            name_table_size=reader.read_u32(),
            archive_total_size=reader.read_u32(),
        )
        reader.skip(0x10)
        return header


@dataclass(frozen=True)
class Record:
    id: int
    parent_id: int
    info_offset: int
    info_count: int
    directory_info_offset: int

    @classmethod
    def read(cls, reader: ByteReader) -> Record:
        record_id = reader.read_u32()
        parent_id = reader.read_u32()
        info_offset = reader.read_u32()
        info_count = reader.read_u32()
        reader.skip(4)
        directory_info_offset = reader.read_u32()
        reader.skip(8)
        return cls(record_id, parent_id, info_offset, info_count, directory_info_offset)


@dataclass(frozen=True)
class Info:
    record_id: int
    kind: InfoKind
    file_offset: int
    file_real_size: int
    file_full_size: int
    filename_offset: int
    filename_length: int
    sha_256: bytes

    @classmethod
    def read(cls, reader: ByteReader) -> Info:
        reader.skip(2)
        kind = InfoKind.FILE if reader.read_u16() == 1 else InfoKind.DIRECTORY
        filename_offset = reader.read_u32()
        filename_length = reader.read_u32()
        file_offset = reader.read_u32()
        file_real_size = reader.read_u32()
        reader.skip(4)
        record_id = reader.read_u32()
        file_full_size = reader.read_u32()
        sha_256 = reader.read_slice(CHECKSUM_SIZE)
        return cls(
            record_id=record_id,
            kind=kind,
            file_offset=file_offset,
            file_real_size=file_real_size,
            file_full_size=file_full_size,
            filename_offset=filename_offset,
            filename_length=filename_length,
            sha_256=sha_256,
        )


@dataclass
class FileNode:
    name: str
    offset: int
    size: int


@dataclass
class DirectoryNode:
    name: str
    children: list[Node] = field(default_factory=list)


Node = Union[DirectoryNode, FileNode]


def _read_names(reader: ByteReader, size: int, infos: list[Info]) -> dict[int, str]:
    table = reader.read_slice(size)
    names = {}
    for info in infos:
        end = info.filename_offset + info.filename_length
        if end > len(table):
            raise UnpackError(f"file name at {info.filename_offset} runs past the name table")
        raw = table[info.filename_offset:end]
        names[info.filename_offset] = raw.decode("utf-8").strip()
    return names


def _build_directory(
    name: str,
    records: Iterator[Record],
    infos: list[Info],
    names: dict[int, str],
) -> DirectoryNode:
    try:
        record = next(records)
    except StopIteration:
        raise UnpackError("metadata holds fewer records than directories") from None
    end = record.info_offset + record.info_count
    if end > len(infos):
        raise UnpackError(f"record {record.id} refers past the info table")

    children: list[Node] = []
    for info in infos[record.info_offset:end]:
        child_name = names[info.filename_offset]
        if info.kind is InfoKind.FILE:
            children.append(FileNode(child_name, info.file_offset, info.file_real_size))
        else:
            children.append(_build_directory(child_name, records, infos, names))
    return DirectoryNode(name, children)


@dataclass
class Metadata:
    """The parsed archive table: its header and the tree of files it describes."""

    header: Header
    root_node: Node

    @classmethod
    def from_buffer(cls, buffer: bytes) -> Metadata:
        reader = ByteReader(buffer)
        header = Header.read(reader)
        records = [Record.read(reader) for _ in range(header.record_count)]
        infos = [Info.read(reader) for _ in range(header.file_count)]
        names = _read_names(reader, header.name_table_size, infos)
        root = _build_directory(ROOT_NAME, iter(records), infos, names)
        return cls(header=header, root_node=root)

    @classmethod
    def load(cls, path: Union[str, "os.PathLike[str]"]) -> Metadata:
        with open(path, "rb") as fh:
            return cls.from_buffer(fh.read())

    def root(self) -> list[Node]:
        """The children of the root directory."""
        if isinstance(self.root_node, DirectoryNode):
            return self.root_node.children
        raise InvalidNodeKindError()