"""SARC archive writer.

Output layout:
- SARC header, SFAT header and one 16-byte node per file, sorted by hash
- SFNT header and the name table (null-terminated paths, 4-byte padded)
- zero padding up to the data region
- file data, each entry aligned to what its own content requires

The data region start is aligned to the largest alignment of any entry,
so every entry stays aligned relative to the start of the file.
"""

import logging
from dataclasses import dataclass
from typing import List, Tuple

from ..errors import FormatError
from ..formats.magic import DEFAULT_ALIGNMENT, required_alignment
from ..utils.binary import BinaryWriter, round_up
from .archive import SARCArchive, SARCFile
from .header import (
    BOM,
    MAX_HASH_KEY,
    MAX_NODES,
    NAME_FLAG,
    NAME_OFFSET_MASK,
    SARC_HEADER_SIZE,
    SARC_MAGIC,
    SARC_RESERVED,
    SFAT_HEADER_SIZE,
    SFAT_MAGIC,
    SFAT_NODE_SIZE,
    SFNT_HEADER_SIZE,
    SFNT_MAGIC,
    calc_hash,
)

logger = logging.getLogger(__name__)


@dataclass
class _PackEntry:
    path: str
    file: SARCFile
    name_hash: int
    name_offset: int = 0  # in 4-byte words
    data_start: int = 0

    @property
    def data_end(self) -> int:
        return self.data_start + self.file.size


class SARCWriter:
    """Serializer for SARC archives."""

    def __init__(self, archive: SARCArchive):
        self.archive = archive

    def _entry_hash(self, path: str, file: SARCFile) -> int:
        if file.has_name:
            return calc_hash(path, self.archive.hash_key)
        return file.name_hash

    def _collect(self) -> List[_PackEntry]:
        if not 0 <= self.archive.hash_key <= MAX_HASH_KEY:
            raise FormatError(f"Hash key does not fit 32 bits: {self.archive.hash_key:#x}")
        entries = [
            _PackEntry(path=path, file=file, name_hash=self._entry_hash(path, file))
            for path, file in self.archive.walk()
        ]
        if len(entries) > MAX_NODES:
            raise FormatError(f"Too many files for one archive: {len(entries)}")
        # sorted() is stable: colliding hashes keep tree order
        return sorted(entries, key=lambda e: e.name_hash)

    def _build_name_table(self, entries: List[_PackEntry]) -> bytes:
        table = bytearray()
        for entry in entries:
            if not entry.file.has_name:
                continue
            word_offset = len(table) // 4
            if word_offset > NAME_OFFSET_MASK:
                raise FormatError(f"Name table too large at {entry.path!r}", offset=len(table))
            entry.name_offset = word_offset
            table += entry.path.encode("utf-8") + b"\x00"
            table += b"\x00" * (round_up(len(table), 4) - len(table))
        return bytes(table)

    def _build_data_region(self, entries: List[_PackEntry]) -> Tuple[bytes, int]:
        region = bytearray()
        max_alignment = DEFAULT_ALIGNMENT
        for entry in entries:
            alignment = required_alignment(entry.file.data)
            max_alignment = max(max_alignment, alignment)
            region += b"\x00" * (round_up(len(region), alignment) - len(region))
            entry.data_start = len(region)
            region += entry.file.data
        return bytes(region), max_alignment

    def write(self) -> Tuple[bytes, int]:
        """Serialize the archive.

        Returns the archive bytes and the alignment applied to the data
        region.
        """
        entries = self._collect()
        name_table = self._build_name_table(entries)
        data_region, max_alignment = self._build_data_region(entries)

        header_size = (
            SARC_HEADER_SIZE
            + SFAT_HEADER_SIZE
            + SFAT_NODE_SIZE * len(entries)
            + SFNT_HEADER_SIZE
            + len(name_table)
        )
        data_offset = round_up(round_up(header_size, 4), max_alignment)

        writer = BinaryWriter(self.archive.endianness)

        writer.write_bytes(SARC_MAGIC)
        writer.write_u16(SARC_HEADER_SIZE)
        writer.write_u16(BOM)
        writer.write_u32(data_offset + len(data_region))
        writer.write_u32(data_offset)
        writer.write_u32(SARC_RESERVED)

        writer.write_bytes(SFAT_MAGIC)
        writer.write_u16(SFAT_HEADER_SIZE)
        writer.write_u16(len(entries))
        writer.write_u32(self.archive.hash_key)

        for entry in entries:
            writer.write_u32(entry.name_hash)
            writer.write_u32(NAME_FLAG | entry.name_offset if entry.file.has_name else 0)
            writer.write_u32(entry.data_start)
            writer.write_u32(entry.data_end)

        writer.write_bytes(SFNT_MAGIC)
        writer.write_u16(SFNT_HEADER_SIZE)
        writer.write_u16(0)
        writer.write_bytes(name_table)

        writer.pad_to(data_offset)
        writer.write_bytes(data_region)

        logger.debug(
            "Wrote SARC: %d files, data at 0x%X, alignment 0x%X, %d bytes",
            len(entries),
            data_offset,
            max_alignment,
            writer.tell(),
        )
        return writer.getvalue(), max_alignment


def write_archive(archive: SARCArchive) -> Tuple[bytes, int]:
    """Serialize an archive; returns (bytes, data region alignment)."""
    return SARCWriter(archive).write()
