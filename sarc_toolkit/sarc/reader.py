"""SARC archive reader."""

import logging
from typing import List, Optional

from ..errors import FormatError
from ..formats.magic import guess_extension
from ..utils.binary import BinaryReader, Endianness
from .archive import SARCArchive
from .header import (
    BOM_BIG,
    BOM_LITTLE,
    SARC_HEADER_SIZE,
    SARC_MAGIC,
    SFAT_HEADER_SIZE,
    SFAT_MAGIC,
    SFNT_HEADER_SIZE,
    SFNT_MAGIC,
    SARCHeader,
    SFATHeader,
    SFATNode,
    unnamed_file_name,
)

logger = logging.getLogger(__name__)


class SARCReader:
    """Parser for SARC archives held in memory.

    Parsing fills in a fresh archive and only hands it out once every node
    has been read, so a failed parse leaves nothing half-built behind.
    """

    def __init__(self, data: bytes):
        self._data = bytes(data)
        self._reader = BinaryReader(self._data)
        self._header: Optional[SARCHeader] = None
        self._sfat: Optional[SFATHeader] = None
        self._nodes: List[SFATNode] = []
        self._sfnt_offset = 0

    @property
    def header(self) -> SARCHeader:
        if not self._header:
            raise RuntimeError("Archive not parsed")
        return self._header

    @property
    def sfat(self) -> SFATHeader:
        if not self._sfat:
            raise RuntimeError("Archive not parsed")
        return self._sfat

    @property
    def nodes(self) -> List[SFATNode]:
        return self._nodes

    def read(self) -> SARCArchive:
        """Parse the whole archive."""
        self._nodes = []
        self._read_header()
        self._read_sfat()
        self._read_sfnt_header()

        archive = SARCArchive(endianness=self.header.endianness, hash_key=self.sfat.hash_key)
        for node in self._nodes:
            data = self._read_node_data(node)
            if node.has_name:
                path = self._read_name(node)
                archive.add_path(path, data, has_name=True)
            else:
                name = unnamed_file_name(node.name_hash, guess_extension(data))
                archive.add_path(name, data, has_name=False)

        logger.debug(
            "Parsed SARC: %d nodes, %s endian, hash key 0x%X",
            len(self._nodes),
            archive.endianness.name.lower(),
            archive.hash_key,
        )
        return archive

    def _expect_magic(self, magic: bytes) -> None:
        offset = self._reader.tell()
        found = self._reader.read_bytes(len(magic))
        if found != magic:
            raise FormatError(
                f"Invalid {magic.decode('ascii')} magic: {found!r}",
                offset=offset,
                length=len(self._data),
            )

    def _read_header(self) -> None:
        """Read the 20-byte SARC header and detect byte order."""
        reader = self._reader
        reader.seek(0)
        self._expect_magic(SARC_MAGIC)

        reader.seek(6)
        bom = reader.read_bytes(2)
        if bom == BOM_BIG:
            reader.endianness = Endianness.BIG
        elif bom == BOM_LITTLE:
            reader.endianness = Endianness.LITTLE
        else:
            raise FormatError(
                f"Invalid BOM: {bom[0]:02X} {bom[1]:02X}", offset=6, length=len(self._data)
            )

        reader.seek(4)
        header_size = reader.read_u16()
        reader.skip(2)  # BOM
        file_size = reader.read_u32()
        data_offset = reader.read_u32()
        reserved = reader.read_u32()

        if header_size != SARC_HEADER_SIZE:
            logger.warning("Unexpected SARC header size 0x%X", header_size)

        self._header = SARCHeader(
            magic=SARC_MAGIC,
            header_size=header_size,
            endianness=reader.endianness,
            file_size=file_size,
            data_offset=data_offset,
            reserved=reserved,
        )

    def _read_sfat(self) -> None:
        """Read the SFAT header and its node records."""
        reader = self._reader
        self._expect_magic(SFAT_MAGIC)

        header_size = reader.read_u16()
        node_count = reader.read_u16()
        hash_key = reader.read_u32()

        if header_size != SFAT_HEADER_SIZE:
            logger.warning("Unexpected SFAT header size 0x%X", header_size)

        self._sfat = SFATHeader(
            magic=SFAT_MAGIC,
            header_size=header_size,
            node_count=node_count,
            hash_key=hash_key,
        )

        for _ in range(node_count):
            self._nodes.append(
                SFATNode(
                    name_hash=reader.read_u32(),
                    name_field=reader.read_u32(),
                    data_start=reader.read_u32(),
                    data_end=reader.read_u32(),
                )
            )

    def _read_sfnt_header(self) -> None:
        """Check the SFNT header that follows the node records."""
        reader = self._reader
        self._sfnt_offset = reader.tell()
        self._expect_magic(SFNT_MAGIC)

        header_size = reader.read_u16()
        reader.skip(2)  # reserved

        if header_size != SFNT_HEADER_SIZE:
            logger.warning("Unexpected SFNT header size 0x%X", header_size)

    def _read_node_data(self, node: SFATNode) -> bytes:
        start = self.header.data_offset + node.data_start
        end = self.header.data_offset + node.data_end
        if node.data_end < node.data_start or end > len(self._data):
            raise FormatError(
                "File data out of bounds",
                offset=start,
                length=len(self._data),
                node_hash=node.name_hash,
            )
        return self._data[start:end]

    def _read_name(self, node: SFATNode) -> str:
        self._reader.seek(self._sfnt_offset + SFNT_HEADER_SIZE + node.name_offset * 4)
        return self._reader.read_cstring()


def read_archive(data: bytes) -> SARCArchive:
    """Parse raw SARC bytes into an archive."""
    return SARCReader(data).read()
