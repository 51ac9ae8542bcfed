"""In-memory SARC archive tree.

An archive owns a single unnamed root folder. Folders own their children
outright; there are no parent links, so the tree is dropped as an ordinary
value graph.
"""

import re
from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Optional, Tuple, Union

from ..errors import FormatError
from ..utils.binary import Endianness
from .header import DEFAULT_ENDIANNESS, DEFAULT_HASH_KEY, UNNAMED_PREFIX

# At most 8 hex digits: the hash is 32 bits
HASH_STEM = re.compile(r"[0-9A-Fa-f]{1,8}")


@dataclass
class SARCFile:
    """A file entry.

    ``has_name`` is False for entries whose name is a ``hash_<HEX>``
    placeholder; such names are never written to the name table.
    """

    name: str
    data: bytes
    has_name: bool = True

    def __post_init__(self):
        if "/" in self.name:
            raise ValueError(f"Entry name must not contain '/': {self.name!r}")
        self.data = bytes(self.data)

    @property
    def name_hash(self) -> int:
        """Hash embedded in a placeholder name (unnamed files only)."""
        stem = self.name[len(UNNAMED_PREFIX) :].split(".")[0]
        if not self.name.startswith(UNNAMED_PREFIX) or not HASH_STEM.fullmatch(stem):
            raise FormatError(f"Unnamed file has no embedded hash: {self.name!r}")
        return int(stem, 16)

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass
class SARCFolder:
    """A folder entry holding an ordered list of children."""

    name: str
    contents: List["Entry"] = field(default_factory=list)

    def __post_init__(self):
        if "/" in self.name:
            raise ValueError(f"Entry name must not contain '/': {self.name!r}")

    def add(self, entry: "Entry") -> None:
        self.contents.append(entry)

    def get_folder(self, name: str) -> Optional["SARCFolder"]:
        """Return the first child folder with this name, if any."""
        for entry in self.contents:
            if isinstance(entry, SARCFolder) and entry.name == name:
                return entry
        return None

    def add_path(self, path: str, data: bytes, has_name: bool = True) -> SARCFile:
        """Insert a file at a slash-delimited path, creating folders as needed."""
        parts = path.split("/")
        current = self
        for part in parts[:-1]:
            folder = current.get_folder(part)
            if folder is None:
                folder = SARCFolder(part)
                current.add(folder)
            current = folder

        entry = SARCFile(parts[-1], data, has_name)
        current.add(entry)
        return entry

    def walk(self, prefix: str = "") -> Iterator[Tuple[str, SARCFile]]:
        """Yield (full_path, file) pairs in pre-order."""
        for entry in self.contents:
            if isinstance(entry, SARCFile):
                yield prefix + entry.name, entry
            else:
                yield from entry.walk(prefix + entry.name + "/")


Entry = Union[SARCFile, SARCFolder]


class SARCArchive:
    """A SARC archive: a folder tree plus byte order and hash key."""

    def __init__(
        self,
        endianness: Endianness = DEFAULT_ENDIANNESS,
        hash_key: int = DEFAULT_HASH_KEY,
    ):
        self.root = SARCFolder("")
        self.endianness = endianness
        self.hash_key = hash_key

    def add_file(self, file: SARCFile) -> None:
        """Add a file directly under the root folder."""
        self.root.add(file)

    def add_folder(self, folder: SARCFolder) -> None:
        """Add a folder directly under the root folder."""
        self.root.add(folder)

    def get_subfolder(self, name: str) -> Optional[SARCFolder]:
        return self.root.get_folder(name)

    def add_path(self, path: str, data: bytes, has_name: bool = True) -> SARCFile:
        return self.root.add_path(path, data, has_name)

    def walk(self) -> Iterator[Tuple[str, SARCFile]]:
        return self.root.walk()

    def flatten(self) -> List[Tuple[str, bytes]]:
        """List every file as (full_path, data) in pre-order."""
        return [(path, entry.data) for path, entry in self.walk()]

    @property
    def file_count(self) -> int:
        return sum(1 for _ in self.walk())

    @classmethod
    def from_files(
        cls,
        files: Iterable[Tuple[str, bytes]],
        endianness: Endianness = DEFAULT_ENDIANNESS,
        hash_key: int = DEFAULT_HASH_KEY,
    ) -> "SARCArchive":
        """Build an archive from (path, data) pairs.

        Leaf names starting with ``hash_`` are treated as unnamed entries.
        """
        archive = cls(endianness=endianness, hash_key=hash_key)
        for path, data in files:
            path = path.replace("\\", "/")
            leaf = path.rsplit("/", 1)[-1]
            archive.add_path(path, data, has_name=not leaf.startswith(UNNAMED_PREFIX))
        return archive

    @classmethod
    def from_bytes(cls, data: bytes) -> "SARCArchive":
        """Parse an archive from raw (uncompressed) SARC bytes."""
        from .reader import read_archive

        return read_archive(data)

    def to_bytes(self) -> bytes:
        """Serialize the archive to raw SARC bytes."""
        from .writer import write_archive

        return write_archive(self)[0]

    def __len__(self) -> int:
        return self.file_count

    def __iter__(self) -> Iterator[Tuple[str, SARCFile]]:
        return self.walk()

    def __repr__(self) -> str:
        return (
            f"SARCArchive(files={self.file_count}, endianness={self.endianness.name}, "
            f"hash_key=0x{self.hash_key:X})"
        )
