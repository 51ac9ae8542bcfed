"""SARC header, SFAT and SFNT structures."""

from dataclasses import dataclass

from ..utils.binary import Endianness

# Section magic bytes
SARC_MAGIC = b"SARC"
SFAT_MAGIC = b"SFAT"
SFNT_MAGIC = b"SFNT"

SARC_HEADER_SIZE = 0x14
SFAT_HEADER_SIZE = 0x0C
SFAT_NODE_SIZE = 0x10
SFNT_HEADER_SIZE = 0x08

# Written as-is in the reserved field after the data offset
SARC_RESERVED = 0x01000000

BOM = 0xFEFF
BOM_BIG = b"\xfe\xff"
BOM_LITTLE = b"\xff\xfe"

DEFAULT_HASH_KEY = 0x65
DEFAULT_ENDIANNESS = Endianness.BIG

# SFAT name field: top byte is the has-name flag, low 24 bits a word offset
NAME_FLAG = 0x01000000
NAME_OFFSET_MASK = 0x00FFFFFF
MAX_NODES = 0xFFFF
MAX_HASH_KEY = 0xFFFFFFFF

UNNAMED_PREFIX = "hash_"


def calc_hash(name: str, key: int = DEFAULT_HASH_KEY) -> int:
    """Hash a full path the way the SFAT index does (Horner's rule mod 2^32)."""
    result = 0
    for char in name:
        result = (result * key + ord(char)) & 0xFFFFFFFF
    return result


def unnamed_file_name(name_hash: int, extension: str) -> str:
    """Build the placeholder name given to entries without a stored name."""
    return f"{UNNAMED_PREFIX}{name_hash:X}{extension}"


@dataclass
class SARCHeader:
    """SARC archive header (20 bytes)."""

    magic: bytes  # 4 bytes: "SARC"
    header_size: int  # 2 bytes: 0x14
    endianness: Endianness  # 2 bytes: BOM
    file_size: int  # 4 bytes: Total archive size
    data_offset: int  # 4 bytes: Absolute start of the data region
    reserved: int  # 4 bytes


@dataclass
class SFATHeader:
    """SFAT index header (12 bytes)."""

    magic: bytes  # 4 bytes: "SFAT"
    header_size: int  # 2 bytes: 0x0C
    node_count: int  # 2 bytes
    hash_key: int  # 4 bytes: Multiplier for calc_hash


@dataclass
class SFATNode:
    """SFAT index record (16 bytes)."""

    name_hash: int  # 4 bytes
    name_field: int  # 4 bytes: Flag byte + 24-bit word offset into SFNT
    data_start: int  # 4 bytes: Relative to data region
    data_end: int  # 4 bytes: Relative to data region

    @property
    def has_name(self) -> bool:
        return (self.name_field >> 24) != 0

    @property
    def name_offset(self) -> int:
        """Offset of the name in 4-byte words."""
        return self.name_field & NAME_OFFSET_MASK
