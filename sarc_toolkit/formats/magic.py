"""File type detection from magic signatures.

Archives often store entries without names, so the type of an entry has to
be guessed from its content. The same signatures also decide how strictly
an entry's data must be aligned inside a SARC data region.

Key characteristics:
- Checks run in a fixed priority order, first match wins
- A buffer too short for a check simply does not match
- Anything shorter than 4 bytes is treated as generic binary
"""

from dataclasses import dataclass
from typing import List, Tuple

DEFAULT_EXTENSION = ".bin"
DEFAULT_ALIGNMENT = 4

# Footer magic of FLIM/CLIM textures sits this far before end-of-file
TAIL_OFFSET = 0x28


@dataclass(frozen=True)
class Signature:
    """A magic byte string expected at a fixed position.

    A non-negative offset is measured from the start of the buffer; the
    tail signatures use ``tail=True`` and are measured back from the end.
    """

    magic: bytes
    offset: int = 0
    tail: bool = False

    def matches(self, data: bytes) -> bool:
        size = len(self.magic)
        if self.tail:
            if len(data) <= TAIL_OFFSET:
                return False
            start = len(data) - TAIL_OFFSET
        else:
            start = self.offset
        if len(data) < start + size:
            return False
        return data[start : start + size] == self.magic


def _head(magic: bytes) -> Signature:
    return Signature(magic)


def _tail(magic: bytes) -> Signature:
    return Signature(magic, tail=True)


EXTENSION_TABLE: List[Tuple[Signature, str]] = [
    # 8-byte headers
    (_head(b"BNTX\x00\x00\x00\x00"), ".bntx"),
    (_head(b"BNSH\x00\x00\x00\x00"), ".bnsh"),
    (_head(b"MsgStdBn"), ".msbt"),
    (_head(b"MsgPrjBn"), ".msbp"),
    # 4-byte headers
    (_head(b"SARC"), ".sarc"),
    (_head(b"Yaz0"), ".szs"),
    (_head(b"Yaz1"), ".szs"),
    (_head(b"FFNT"), ".bffnt"),
    (_head(b"CFNT"), ".bcfnt"),
    (_head(b"CSTM"), ".bcstm"),
    (_head(b"FSTM"), ".bfstm"),
    (_head(b"FSTP"), ".bfstp"),
    (_head(b"CWAV"), ".bcwav"),
    (_head(b"FWAV"), ".bfwav"),
    (_head(b"Gfx2"), ".gtx"),
    (_head(b"FRES"), ".bfres"),
    (_head(b"AAHS"), ".sharc"),
    (_head(b"BAHS"), ".sharcfb"),
    (_head(b"FSHA"), ".bfsha"),
    (_head(b"FLAN"), ".bflan"),
    (_head(b"FLYT"), ".bflyt"),
    (_head(b"CLAN"), ".bclan"),
    (_head(b"CLYT"), ".bclyt"),
    (_head(b"CTPK"), ".ctpk"),
    (_head(b"CGFX"), ".bcres"),
    (_head(b"AAMP"), ".aamp"),
    # texture footers
    (_tail(b"FLIM"), ".bflim"),
    (_tail(b"CLIM"), ".bclim"),
    # 2-byte headers
    (_head(b"YB"), ".byml"),
    (_head(b"BY"), ".byml"),
    (Signature(b"SCDL", offset=0x0C), ".bcd"),
]

ALIGNMENT_TABLE: List[Tuple[Signature, int]] = [
    (_head(b"SARC"), 0x2000),
    (_head(b"Yaz0"), 0x80),
    (_head(b"Yaz1"), 0x80),
    (_head(b"FFNT"), 0x2000),
    (_head(b"CFNT"), 0x80),
    (_head(b"CSTM"), 0x20),
    (_head(b"FSTM"), 0x20),
    (_head(b"FSTP"), 0x20),
    (_head(b"CWAV"), 0x20),
    (_head(b"FWAV"), 0x20),
    (_head(b"BNTX\x00\x00\x00\x00"), 0x1000),
    (_head(b"BNSH\x00\x00\x00\x00"), 0x1000),
    (_head(b"FSHA    "), 0x1000),
    (_head(b"Gfx2"), 0x2000),
    (_head(b"FRES"), 0x2000),
    (_head(b"AAHS"), 0x2000),
    (_head(b"BAHS"), 0x2000),
    (_tail(b"FLIM"), 0x2000),
    (_tail(b"CLIM"), 0x80),
    (_head(b"CTPK"), 0x10),
    (_head(b"CGFX"), 0x80),
    (_head(b"AAMP"), 8),
    (_head(b"YB"), 0x80),
    (_head(b"BY"), 0x80),
    (_head(b"MsgStdBn"), 0x80),
    (_head(b"MsgPrjBn"), 0x80),
    (Signature(b"SCDL", offset=0x0C), 0x100),
]


def guess_extension(data: bytes) -> str:
    """Guess a file extension (with leading dot) from content."""
    if len(data) < 4:
        return DEFAULT_EXTENSION
    for signature, extension in EXTENSION_TABLE:
        if signature.matches(data):
            return extension
    return DEFAULT_EXTENSION


def required_alignment(data: bytes) -> int:
    """Return the byte boundary this content must start on in a SARC."""
    if len(data) < 4:
        return DEFAULT_ALIGNMENT
    for signature, alignment in ALIGNMENT_TABLE:
        if signature.matches(data):
            return alignment
    return DEFAULT_ALIGNMENT
