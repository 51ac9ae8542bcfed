"""SARC Toolkit - read, write and compress SARC archives."""

from .compression import compress, decompress, decompress_all, is_compressed
from .errors import EncodingError, FormatError, SARCError, TruncatedStream
from .formats import guess_extension, required_alignment
from .sarc import SARCArchive, SARCFile, SARCFolder, calc_hash, read_archive, write_archive
from .utils.binary import Endianness

__version__ = "0.1.0"


def load_archive(data: bytes) -> SARCArchive:
    """Parse raw SARC bytes into an archive."""
    return read_archive(data)


def save_archive(archive: SARCArchive) -> bytes:
    """Serialize an archive to raw SARC bytes."""
    return write_archive(archive)[0]


__all__ = [
    "EncodingError",
    "Endianness",
    "FormatError",
    "SARCArchive",
    "SARCError",
    "SARCFile",
    "SARCFolder",
    "TruncatedStream",
    "calc_hash",
    "compress",
    "decompress",
    "decompress_all",
    "guess_extension",
    "is_compressed",
    "load_archive",
    "read_archive",
    "required_alignment",
    "save_archive",
    "write_archive",
]
