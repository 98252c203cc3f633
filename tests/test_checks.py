import hashlib
import struct

import pytest

from tm2kit.checks import hash_files, process
from tm2kit.metadata import DirectoryNode, FileNode

EMPTY_SHA256 = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"


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


def test_hash_of_empty_file(tmp_path):
    (tmp_path / "empty.bin").write_bytes(b"")
    assert hash_files([FileNode("empty.bin", 0, 0)], tmp_path) == {tmp_path / "empty.bin": EMPTY_SHA256}


def test_hash_files_walks_directories(tmp_path):
    (tmp_path / "sub").mkdir()
    (tmp_path / "top.bin").write_bytes(b"top")
    (tmp_path / "sub" / "deep.bin").write_bytes(b"deep")
    nodes = [FileNode("top.bin", 0, 3), DirectoryNode("sub", [FileNode("deep.bin", 3, 4)])]
    digests = hash_files(nodes, tmp_path)
    assert set(digests) == {tmp_path / "top.bin", tmp_path / "sub" / "deep.bin"}
    assert digests[tmp_path / "top.bin"] == hashlib.sha256(b"top").hexdigest()


def test_hash_files_differs_for_different_content(tmp_path):
    (tmp_path / "a").write_bytes(b"one")
    (tmp_path / "b").write_bytes(b"two")
    digests = hash_files([FileNode("a", 0, 3), FileNode("b", 3, 3)], tmp_path)
    assert digests[tmp_path / "a"] != digests[tmp_path / "b"]
    assert all(len(value) == 64 for value in digests.values())


def test_hash_files_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        hash_files([FileNode("absent.bin", 0, 1)], tmp_path)


def test_process_uses_metadata(tmp_path):
    (tmp_path / "PAC0.BIN").write_bytes(_build_pac0([("dir", "d", [("file", "f.bin", 0, 0)])]))
    root = tmp_path / "extracted"
    (root / "d").mkdir(parents=True)
    (root / "d" / "f.bin").write_bytes(b"")
    assert process(tmp_path / "PAC0.BIN", root) == {root / "d" / "f.bin": EMPTY_SHA256}