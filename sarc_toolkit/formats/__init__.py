"""Content signature detection."""

from .magic import DEFAULT_ALIGNMENT, DEFAULT_EXTENSION, guess_extension, required_alignment

__all__ = ["DEFAULT_ALIGNMENT", "DEFAULT_EXTENSION", "guess_extension", "required_alignment"]
