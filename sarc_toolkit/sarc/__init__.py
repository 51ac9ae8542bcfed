"""SARC archive support."""

from .archive import Entry, SARCArchive, SARCFile, SARCFolder
from .header import DEFAULT_ENDIANNESS, DEFAULT_HASH_KEY, calc_hash
from .reader import SARCReader, read_archive
from .writer import SARCWriter, write_archive

__all__ = [
    "Entry",
    "SARCArchive",
    "SARCFile",
    "SARCFolder",
    "SARCReader",
    "SARCWriter",
    "DEFAULT_ENDIANNESS",
    "DEFAULT_HASH_KEY",
    "calc_hash",
    "read_archive",
    "write_archive",
]
