"""Tests for the SARC reader."""

import struct
from typing import List, Tuple

import pytest

from sarc_toolkit.errors import EncodingError, FormatError, TruncatedStream
from sarc_toolkit.sarc.archive import SARCFile
from sarc_toolkit.sarc.header import calc_hash
from sarc_toolkit.sarc.reader import SARCReader, read_archive
from sarc_toolkit.utils.binary import Endianness


def create_sarc(
    files: List[Tuple[str, bytes]],
    endian: str = ">",
    hash_key: int = 0x65,
    unnamed: Tuple[int, ...] = (),
) -> bytes:
    """Build a minimal SARC by hand.

    Files listed by index in ``unnamed`` are stored without a name, using
    the hash of their path as the node hash.
    """
    nodes = []
    names = bytearray()
    data = bytearray()
    for i, (path, content) in enumerate(files):
        name_hash = calc_hash(path, hash_key)
        if i in unnamed:
            name_field = 0
        else:
            name_field = 0x01000000 | (len(names) // 4)
            names += path.encode("utf-8") + b"\x00"
            while len(names) % 4:
                names += b"\x00"
        while len(data) % 4:
            data += b"\x00"
        start = len(data)
        data += content
        nodes.append((name_hash, name_field, start, len(data)))

    data_offset = 0x20 + 0x10 * len(nodes) + 0x08 + len(names)
    bom = 0xFEFF
    out = bytearray(b"SARC")
    out += struct.pack(endian + "HHIII", 0x14, bom, data_offset + len(data), data_offset, 0x01000000)
    out += b"SFAT" + struct.pack(endian + "HHI", 0x0C, len(nodes), hash_key)
    for node in nodes:
        out += struct.pack(endian + "IIII", *node)
    out += b"SFNT" + struct.pack(endian + "HH", 0x08, 0)
    out += names
    out += data
    return bytes(out)


class TestSARCReader:
    """Tests for SARCReader."""

    def test_big_endian_archive(self):
        arc = read_archive(create_sarc([("a.txt", b"hello"), ("dir/b.txt", b"world")]))

        assert arc.endianness is Endianness.BIG
        assert arc.hash_key == 0x65
        assert sorted(arc.flatten()) == [("a.txt", b"hello"), ("dir/b.txt", b"world")]

    def test_little_endian_archive(self):
        data = create_sarc([("a.txt", b"hello")], endian="<", hash_key=0x1234)
        assert data[6:8] == b"\xff\xfe"

        arc = read_archive(data)
        assert arc.endianness is Endianness.LITTLE
        assert arc.hash_key == 0x1234
        assert arc.flatten() == [("a.txt", b"hello")]

    def test_folders_are_reused(self):
        arc = read_archive(
            create_sarc([("d/x.bin", b"1"), ("d/y.bin", b"2"), ("d/e/z.bin", b"3")])
        )
        assert len(arc.root.contents) == 1
        folder = arc.get_subfolder("d")
        assert [entry.name for entry in folder.contents] == ["x.bin", "y.bin", "e"]

    def test_unnamed_entry(self):
        content = b"SARC" + b"\x00" * 12
        data = create_sarc([("nested.sarc", content)], unnamed=(0,))
        arc = read_archive(data)

        (path, entry), = list(arc.walk())
        expected_hash = calc_hash("nested.sarc", 0x65)
        assert path == f"hash_{expected_hash:X}.sarc"
        assert isinstance(entry, SARCFile)
        assert not entry.has_name
        assert entry.name_hash == expected_hash

    def test_zero_nodes(self):
        arc = read_archive(create_sarc([]))
        assert arc.root.contents == []

    def test_empty_file(self):
        arc = read_archive(create_sarc([("empty", b"")]))
        assert arc.flatten() == [("empty", b"")]

    def test_utf8_names(self):
        arc = read_archive(create_sarc([("Message/日本語.msbt", b"x")]))
        assert arc.flatten() == [("Message/日本語.msbt", b"x")]

    def test_reader_exposes_headers(self):
        reader = SARCReader(create_sarc([("a", b"1"), ("b", b"2")]))
        reader.read()
        assert reader.sfat.node_count == 2
        assert reader.header.file_size == len(create_sarc([("a", b"1"), ("b", b"2")]))
        assert reader.nodes[0].has_name
        assert reader.nodes[1].name_offset == 1

    def test_header_before_read(self):
        with pytest.raises(RuntimeError):
            SARCReader(b"").header


class TestSARCReaderErrors:
    """Failure modes of the reader."""

    def test_invalid_magic(self):
        data = b"CRAS" + create_sarc([("a", b"1")])[4:]
        with pytest.raises(FormatError, match="Invalid SARC magic") as exc_info:
            read_archive(data)
        assert exc_info.value.offset == 0
        assert exc_info.value.length == len(data)

    def test_invalid_bom(self):
        data = bytearray(create_sarc([("a", b"1")]))
        data[6:8] = b"\x12\x34"
        with pytest.raises(FormatError, match="Invalid BOM: 12 34"):
            read_archive(bytes(data))

    def test_invalid_sfat_magic(self):
        data = bytearray(create_sarc([("a", b"1")]))
        data[0x14:0x18] = b"XXXX"
        with pytest.raises(FormatError, match="Invalid SFAT magic") as exc_info:
            read_archive(bytes(data))
        assert exc_info.value.offset == 0x14

    def test_invalid_sfnt_magic(self):
        data = bytearray(create_sarc([("a", b"1")]))
        data[0x30:0x34] = b"XXXX"
        with pytest.raises(FormatError, match="Invalid SFNT magic"):
            read_archive(bytes(data))

    def test_truncated_header(self):
        with pytest.raises(TruncatedStream):
            read_archive(b"SARC\x00\x14\xfe\xff\x00")

    def test_truncated_node_table(self):
        data = create_sarc([("a", b"1"), ("b", b"2")])
        with pytest.raises(FormatError):
            read_archive(data[:0x28])

    def test_data_out_of_bounds(self):
        data = create_sarc([("a.bin", b"12345678")])
        name_hash = calc_hash("a.bin", 0x65)
        with pytest.raises(FormatError, match="out of bounds") as exc_info:
            read_archive(data[:-4])
        assert exc_info.value.node_hash == name_hash
        assert f"{name_hash:08X}" in str(exc_info.value)

    def test_invalid_utf8_name(self):
        data = create_sarc([("ab", b"1")])
        data = data.replace(b"ab\x00", b"\xff\xfe\x00")
        with pytest.raises(EncodingError):
            read_archive(data)

    def test_empty_buffer(self):
        with pytest.raises(FormatError):
            read_archive(b"")
