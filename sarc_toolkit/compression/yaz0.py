"""Yaz0 compression.

Yaz0 is an LZ77 variant used to shrink SARC archives and other assets.

Stream layout:
- 4 bytes: "Yaz0" (or "Yaz1", decoded identically)
- 4 bytes: uncompressed size, big-endian
- 8 bytes: reserved
- groups of one control byte followed by up to 8 operations; a set bit
  (most significant first) is a literal byte, a clear bit a back-reference
"""

import logging
import struct

from ..errors import FormatError

logger = logging.getLogger(__name__)

YAZ0_MAGIC = b"Yaz0"
YAZ1_MAGIC = b"Yaz1"
HEADER_SIZE = 16

DEFAULT_LEVEL = 7
MAX_WINDOW = 0x1000
MIN_MATCH = 3
MAX_MATCH = 0x111
# Matches at least this long use the 3-byte encoding
LONG_MATCH = 0x12


def is_compressed(data: bytes) -> bool:
    """Check whether data starts with a Yaz0/Yaz1 magic."""
    return data[:4] in (YAZ0_MAGIC, YAZ1_MAGIC)


def search_window(level: int) -> int:
    """Map a compression level (0-9) to a back-reference window size."""
    if level <= 0:
        return 0
    if level < 9:
        return 0x10E0 * level // 9 - 0xE0
    return MAX_WINDOW


def decompress(data: bytes) -> bytes:
    """Decompress a Yaz0 stream.

    Truncated input is not an error: decoding stops when the input runs
    out and whatever was produced so far is returned.
    """
    if not is_compressed(data):
        raise FormatError(f"Not a Yaz0 stream: magic {data[:4]!r}", offset=0, length=len(data))

    if len(data) < 8:
        logger.warning("Yaz0 header truncated at %d bytes", len(data))
        return b""

    size = struct.unpack_from(">I", data, 4)[0]
    dest = _decode(data, size)

    if len(dest) < size:
        logger.warning("Yaz0 stream ended early: %d of %d bytes decoded", len(dest), size)
    return bytes(dest)


def _decode(src: bytes, size: int) -> bytearray:
    """Run the decoder until size bytes are produced or input runs out.

    Output grows as it is decoded, so memory stays bounded by what the
    input can actually produce.
    """
    src_end = len(src)
    src_pos = HEADER_SIZE
    dest = bytearray()

    while src_pos < src_end and len(dest) < size:
        code = src[src_pos]
        src_pos += 1

        for _ in range(8):
            if len(dest) >= size or src_pos >= src_end:
                return dest

            if code & 0x80:
                dest.append(src[src_pos])
                src_pos += 1
            else:
                if src_pos + 1 >= src_end:
                    return dest
                b1 = src[src_pos]
                b2 = src[src_pos + 1]
                src_pos += 2

                offset = ((b1 & 0x0F) << 8) | b2
                count = b1 >> 4
                if count == 0:
                    if src_pos >= src_end:
                        return dest
                    count = src[src_pos] + LONG_MATCH
                    src_pos += 1
                else:
                    count += 2

                copy_src = len(dest) - offset - 1

                # Byte at a time: source and destination may overlap.
                # Positions before the start of output read as zero.
                for _ in range(count):
                    if len(dest) >= size:
                        break
                    dest.append(dest[copy_src] if copy_src >= 0 else 0)
                    copy_src += 1

            code <<= 1

    return dest


def decompress_all(data: bytes) -> bytes:
    """Strip every Yaz0 layer until the payload is no longer compressed."""
    while is_compressed(data):
        data = decompress(data)
    return data


def _find_match(src: bytes, pos: int, window: int):
    """Find the longest earlier match for the bytes at pos.

    Returns (match_start, match_length); a length of 1 means no match.
    """
    src_end = len(src)
    found = 0
    found_len = 1

    if pos + 2 >= src_end:
        return found, found_len

    search = max(0, pos - window)
    cmp_end = min(pos + MAX_MATCH, src_end)
    first = src[pos]

    while search < pos:
        search = src.find(first, search, pos)
        if search < 0:
            break

        cmp1 = search + 1
        cmp2 = pos + 1
        while cmp2 < cmp_end and src[cmp1] == src[cmp2]:
            cmp1 += 1
            cmp2 += 1

        length = cmp2 - pos
        if length > found_len:
            found_len = length
            found = search
            if found_len == MAX_MATCH:
                break

        search += 1

    return found, found_len


def compress(data: bytes, level: int = DEFAULT_LEVEL) -> bytes:
    """Compress data into a Yaz0 stream.

    Level 0 stores every byte as a literal; higher levels search a larger
    window for back-references. Never fails.
    """
    src = bytes(data)
    src_end = len(src)
    window = search_window(level)

    dest = bytearray(YAZ0_MAGIC)
    dest += struct.pack(">I", src_end)
    dest += b"\x00" * 8

    pos = 0
    while pos < src_end:
        code_pos = len(dest)
        dest.append(0)
        code = 0

        for i in range(8):
            if pos >= src_end:
                break

            found, found_len = (0, 1)
            if window > 0:
                found, found_len = _find_match(src, pos, window)

            if found_len >= MIN_MATCH:
                delta = pos - found - 1
                if found_len < LONG_MATCH:
                    dest.append((delta >> 8) | ((found_len - 2) << 4))
                    dest.append(delta & 0xFF)
                else:
                    dest.append(delta >> 8)
                    dest.append(delta & 0xFF)
                    dest.append(found_len - LONG_MATCH)
                pos += found_len
            else:
                code |= 0x80 >> i
                dest.append(src[pos])
                pos += 1

        dest[code_pos] = code

    logger.debug("Yaz0 level %d: %d -> %d bytes", level, src_end, len(dest))
    return bytes(dest)
