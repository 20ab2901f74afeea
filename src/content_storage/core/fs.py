# src/content_storage/core/fs.py
"""Filesystem capability used by the folder-based storage.

Components never call the os module directly for storage I/O; they receive a
FileSystem and go through it. Tests can wrap LocalFileSystem to inject faults.
"""

import os
from collections.abc import Iterator
from typing import BinaryIO, Protocol, runtime_checkable


@runtime_checkable
class FileSystem(Protocol):
    """Operations the storage needs from a filesystem."""

    def open_read(self, path: str) -> BinaryIO:
        """Open a file for binary reading."""
        ...

    def open_write(self, path: str) -> BinaryIO:
        """Open (create or truncate) a file for binary writing."""
        ...

    def stat(self, path: str) -> os.stat_result:
        """Stat a path. Raises FileNotFoundError if missing."""
        ...

    def scandir(self, path: str) -> Iterator[os.DirEntry[str]]:
        """Iterate directory entries of a path."""
        ...

    def unlink(self, path: str) -> None:
        """Remove a file. Raises FileNotFoundError if missing."""
        ...

    def makedirs(self, path: str) -> None:
        """Create a directory and its parents, tolerating existing ones."""
        ...


class LocalFileSystem:
    """FileSystem backed by the local operating system."""

    def open_read(self, path: str) -> BinaryIO:
        return open(path, "rb")

    def open_write(self, path: str) -> BinaryIO:
        return open(path, "wb")

    def stat(self, path: str) -> os.stat_result:
        return os.stat(path)

    def scandir(self, path: str) -> Iterator[os.DirEntry[str]]:
        # Entries are yielded as read; the handle is closed once exhausted
        with os.scandir(path) as entries:
            yield from entries

    def unlink(self, path: str) -> None:
        os.unlink(path)

    def makedirs(self, path: str) -> None:
        os.makedirs(path, exist_ok=True)
