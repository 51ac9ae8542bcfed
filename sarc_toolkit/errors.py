"""Exceptions raised by the SARC and Yaz0 codecs."""

from typing import Optional


class SARCError(Exception):
    """Base class for sarc_toolkit errors."""


class FormatError(SARCError):
    """Raised when a buffer does not follow the expected binary layout.

    Carries whatever context is known about the failure: the byte offset
    being read, the total stream length and the hash of the offending node.
    """

    def __init__(
        self,
        message: str,
        offset: Optional[int] = None,
        length: Optional[int] = None,
        node_hash: Optional[int] = None,
    ):
        self.offset = offset
        self.length = length
        self.node_hash = node_hash

        context = []
        if node_hash is not None:
            context.append(f"node 0x{node_hash:08X}")
        if offset is not None:
            context.append(f"offset 0x{offset:X}")
        if length is not None:
            context.append(f"stream length 0x{length:X}")
        if context:
            message = f"{message} ({', '.join(context)})"
        super().__init__(message)


class TruncatedStream(FormatError, EOFError):
    """Ran out of bytes while reading a fixed-size field."""


class EncodingError(SARCError, ValueError):
    """A name in the name table is not valid UTF-8."""
