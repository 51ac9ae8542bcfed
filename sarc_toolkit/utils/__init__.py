"""Shared helpers."""

from .binary import BinaryReader, BinaryWriter, Endianness, round_up

__all__ = ["BinaryReader", "BinaryWriter", "Endianness", "round_up"]
