"""Binary reading and writing utilities with switchable byte order."""

import struct
from enum import Enum
from io import BytesIO
from typing import BinaryIO, Union

from ..errors import EncodingError, TruncatedStream


class Endianness(Enum):
    """Byte order of multi-byte fields; values are ``struct`` prefixes."""

    BIG = ">"
    LITTLE = "<"


def round_up(value: int, alignment: int) -> int:
    """Round value up to the next multiple of alignment."""
    if alignment <= 1:
        return value
    return -(-value // alignment) * alignment


class BinaryReader:
    """Helper for reading binary data in a selectable byte order."""

    def __init__(self, data: Union[bytes, BinaryIO], endianness: Endianness = Endianness.BIG):
        if isinstance(data, (bytes, bytearray, memoryview)):
            self._stream = BytesIO(data)
        else:
            self._stream = data
        self.endianness = endianness

    @property
    def stream(self) -> BinaryIO:
        return self._stream

    def tell(self) -> int:
        return self._stream.tell()

    def seek(self, offset: int, whence: int = 0) -> int:
        return self._stream.seek(offset, whence)

    def size(self) -> int:
        """Return the total length of the underlying stream."""
        current = self.tell()
        end = self._stream.seek(0, 2)
        self._stream.seek(current)
        return end

    def read(self, size: int = -1) -> bytes:
        return self._stream.read(size)

    def read_bytes(self, size: int) -> bytes:
        offset = self.tell()
        data = self._stream.read(size)
        if len(data) < size:
            raise TruncatedStream(
                f"Expected {size} bytes, got {len(data)}",
                offset=offset,
                length=self.size(),
            )
        return data

    def _unpack(self, fmt: str, size: int) -> int:
        return struct.unpack(self.endianness.value + fmt, self.read_bytes(size))[0]

    def read_u8(self) -> int:
        return self._unpack("B", 1)

    def read_u16(self) -> int:
        return self._unpack("H", 2)

    def read_u32(self) -> int:
        return self._unpack("I", 4)

    def read_cstring(self) -> str:
        """Read a null-terminated UTF-8 string.

        Unlike a lenient decoder, invalid UTF-8 raises EncodingError and a
        missing terminator raises TruncatedStream.
        """
        start = self.tell()
        chars = []
        while True:
            byte = self._stream.read(1)
            if not byte:
                raise TruncatedStream(
                    "Unterminated string", offset=start, length=self.size()
                )
            if byte == b"\x00":
                break
            chars.append(byte)
        raw = b"".join(chars)
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise EncodingError(f"Invalid UTF-8 name at offset 0x{start:X}: {raw!r}") from e

    def skip(self, count: int) -> None:
        """Skip forward by count bytes."""
        self._stream.seek(count, 1)

    def align(self, alignment: int) -> None:
        """Align stream position to the given boundary."""
        self.seek(round_up(self.tell(), alignment))

    def remaining(self) -> int:
        """Return number of bytes remaining in stream."""
        return self.size() - self.tell()

    def peek(self, size: int) -> bytes:
        """Read bytes without advancing position."""
        data = self._stream.read(size)
        self._stream.seek(-len(data), 1)
        return data


class BinaryWriter:
    """Helper for building binary data in a selectable byte order."""

    def __init__(self, endianness: Endianness = Endianness.BIG):
        self._stream = BytesIO()
        self.endianness = endianness

    def tell(self) -> int:
        return self._stream.tell()

    def getvalue(self) -> bytes:
        return self._stream.getvalue()

    def write_bytes(self, data: bytes) -> None:
        self._stream.write(data)

    def _pack(self, fmt: str, value: int) -> None:
        self._stream.write(struct.pack(self.endianness.value + fmt, value))

    def write_u8(self, value: int) -> None:
        self._pack("B", value)

    def write_u16(self, value: int) -> None:
        self._pack("H", value)

    def write_u32(self, value: int) -> None:
        self._pack("I", value)

    def pad_to(self, offset: int) -> None:
        """Zero-fill up to an absolute offset (no-op if already past it)."""
        gap = offset - self.tell()
        if gap > 0:
            self._stream.write(b"\x00" * gap)

    def align(self, alignment: int) -> None:
        """Zero-fill up to the next multiple of alignment."""
        self.pad_to(round_up(self.tell(), alignment))
