"""Tests for binary utilities."""

import pytest

from sarc_toolkit.errors import EncodingError, TruncatedStream
from sarc_toolkit.utils.binary import BinaryReader, BinaryWriter, Endianness, round_up


class TestBinaryReader:
    """Tests for BinaryReader class."""

    def test_read_u8(self):
        reader = BinaryReader(b"\x42")
        assert reader.read_u8() == 0x42

    def test_read_u16_big_endian(self):
        reader = BinaryReader(b"\x12\x34")
        assert reader.read_u16() == 0x1234

    def test_read_u16_little_endian(self):
        reader = BinaryReader(b"\x12\x34", Endianness.LITTLE)
        assert reader.read_u16() == 0x3412

    def test_read_u32_big_endian(self):
        reader = BinaryReader(b"\x12\x34\x56\x78")
        assert reader.read_u32() == 0x12345678

    def test_read_u32_little_endian(self):
        reader = BinaryReader(b"\x12\x34\x56\x78", Endianness.LITTLE)
        assert reader.read_u32() == 0x78563412

    def test_switch_endianness_midstream(self):
        reader = BinaryReader(b"\x00\x01\x01\x00")
        assert reader.read_u16() == 1
        reader.endianness = Endianness.LITTLE
        assert reader.read_u16() == 1

    def test_read_cstring(self):
        reader = BinaryReader(b"hello\x00world")
        assert reader.read_cstring() == "hello"
        assert reader.tell() == 6

    def test_read_cstring_utf8(self):
        reader = BinaryReader("café/テスト".encode("utf-8") + b"\x00")
        assert reader.read_cstring() == "café/テスト"

    def test_read_cstring_invalid_utf8(self):
        reader = BinaryReader(b"bad\xff\xfe\x00")
        with pytest.raises(EncodingError):
            reader.read_cstring()

    def test_read_cstring_unterminated(self):
        reader = BinaryReader(b"no terminator")
        with pytest.raises(TruncatedStream, match="Unterminated"):
            reader.read_cstring()

    def test_seek_and_tell(self):
        reader = BinaryReader(b"\x00\x01\x02\x03\x04\x05")
        assert reader.tell() == 0
        reader.seek(3)
        assert reader.tell() == 3
        assert reader.read_u8() == 0x03

    def test_skip(self):
        reader = BinaryReader(b"\x00\x01\x02\x03\x04\x05")
        reader.skip(4)
        assert reader.read_u8() == 0x04

    def test_peek(self):
        reader = BinaryReader(b"\x12\x34\x56")
        assert reader.peek(2) == b"\x12\x34"
        assert reader.tell() == 0  # Position unchanged

    def test_remaining(self):
        reader = BinaryReader(b"\x00\x01\x02\x03\x04\x05")
        assert reader.remaining() == 6
        reader.read_u32()
        assert reader.remaining() == 2

    def test_align(self):
        reader = BinaryReader(b"\x00" * 16)
        reader.seek(1)
        reader.align(4)
        assert reader.tell() == 4

        reader.seek(4)
        reader.align(4)
        assert reader.tell() == 4  # Already aligned

    def test_truncated_read(self):
        reader = BinaryReader(b"\x00\x01")
        with pytest.raises(TruncatedStream) as exc_info:
            reader.read_bytes(10)
        assert exc_info.value.offset == 0
        assert exc_info.value.length == 2

    def test_truncated_stream_is_eof_error(self):
        reader = BinaryReader(b"\x00")
        with pytest.raises(EOFError):
            reader.read_u32()


class TestBinaryWriter:
    """Tests for BinaryWriter class."""

    def test_write_big_endian(self):
        writer = BinaryWriter()
        writer.write_u16(0x1234)
        writer.write_u32(0x56789ABC)
        assert writer.getvalue() == b"\x12\x34\x56\x78\x9a\xbc"

    def test_write_little_endian(self):
        writer = BinaryWriter(Endianness.LITTLE)
        writer.write_u16(0x1234)
        writer.write_u32(0x56789ABC)
        assert writer.getvalue() == b"\x34\x12\xbc\x9a\x78\x56"

    def test_pad_to(self):
        writer = BinaryWriter()
        writer.write_u8(1)
        writer.pad_to(4)
        assert writer.getvalue() == b"\x01\x00\x00\x00"
        writer.pad_to(2)  # Already past
        assert writer.tell() == 4

    def test_align(self):
        writer = BinaryWriter()
        writer.write_bytes(b"abc")
        writer.align(8)
        assert writer.tell() == 8


class TestRoundUp:
    def test_round_up(self):
        assert round_up(0, 4) == 0
        assert round_up(1, 4) == 4
        assert round_up(4, 4) == 4
        assert round_up(0x21, 0x2000) == 0x2000

    def test_round_up_non_power_of_two(self):
        assert round_up(7, 3) == 9
