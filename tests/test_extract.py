import io
import struct

import pytest

from tm2kit.extract import extract_nodes, process
from tm2kit.metadata import DirectoryNode, FileNode


def _build_pac0(children):
    records = []
    infos = []

    def add_dir(items):
        index = len(records)
        records.append(None)
        start = len(infos)
        infos.extend([None] * len(items))
        for i, item in enumerate(items):
            if item[0] == "dir":
                infos[start + i] = (0, item[1], 0, 0)
                add_dir(item[2])
            else:
                infos[start + i] = (1, item[1], item[2], item[3])
        records[index] = (start, len(items))

    add_dir(children)
    names = b""
    packed_infos = []
    for kind, name, offset, size in infos:
        raw = name.encode()
        packed_infos.append(
            struct.pack("<2xHIIII4xII32s", kind, len(names), len(raw), offset, size, 0, size, bytes(32))
        )
        names += raw
    packed_records = [
        struct.pack("<IIII4xI8x", i, 0, start, count, 0) for i, (start, count) in enumerate(records)
    ]
    header = struct.pack("<IIII", len(records), len(infos), len(names), 0) + bytes(16)
    return header + b"".join(packed_records) + b"".join(packed_infos) + names


ARCHIVE = b"HEADERfirst-filesecond"


def test_extract_nodes_writes_tree(tmp_path):
    nodes = [
        FileNode("first.bin", 6, 10),
        DirectoryNode("sub", [FileNode("second.bin", 16, 6)]),
    ]
    extract_nodes(io.BytesIO(ARCHIVE), nodes, tmp_path / "out")
    assert (tmp_path / "out" / "first.bin").read_bytes() == b"first-file"
    assert (tmp_path / "out" / "sub" / "second.bin").read_bytes() == b"second"


def test_extract_nodes_creates_empty_directories(tmp_path):
    extract_nodes(io.BytesIO(b""), [DirectoryNode("empty", [])], tmp_path / "out")
    assert (tmp_path / "out" / "empty").is_dir()


def test_extract_nodes_short_archive_raises(tmp_path):
    with pytest.raises(EOFError):
        extract_nodes(io.BytesIO(ARCHIVE), [FileNode("big.bin", 10, 100)], tmp_path)


def test_process_extracts_archive(tmp_path):
    tree = [
        ("file", "first.bin", 6, 10),
        ("dir", "sub", [("file", "second.bin", 16, 6)]),
    ]
    (tmp_path / "PAC0.BIN").write_bytes(_build_pac0(tree))
    (tmp_path / "PAC1.BIN").write_bytes(ARCHIVE)
    process(tmp_path / "PAC0.BIN", tmp_path / "PAC1.BIN", tmp_path / "extracted")
    assert (tmp_path / "extracted" / "first.bin").read_bytes() == b"first-file"
    assert (tmp_path / "extracted" / "sub" / "second.bin").read_bytes() == b"second"


def test_process_missing_archive_raises(tmp_path):
    (tmp_path / "PAC0.BIN").write_bytes(_build_pac0([("file", "a", 0, 1)]))
    with pytest.raises(FileNotFoundError):
        process(tmp_path / "PAC0.BIN", tmp_path / "PAC1.BIN", tmp_path / "extracted")