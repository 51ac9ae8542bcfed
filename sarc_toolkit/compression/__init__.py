"""Yaz0 compression codec."""

from .yaz0 import DEFAULT_LEVEL, compress, decompress, decompress_all, is_compressed

__all__ = ["DEFAULT_LEVEL", "compress", "decompress", "decompress_all", "is_compressed"]
