# src/content_storage/core/walker.py
"""Enumeration of stored ids.

This is the only place that translates physical file paths back into logical
ids: shard directories and the compression suffix are dropped here.
"""

import os
from collections.abc import Iterator

from content_storage.core.compression import GZIP_SUFFIX
from content_storage.core.fs import FileSystem


def file_id_from_relative_path(relative_path: str) -> str:
    """Logical id of a file given its path relative to the shard directory."""
    file_id = relative_path.replace(os.sep, "/")
    return file_id.removesuffix(GZIP_SUFFIX)


class DirectoryWalker:
    """Lazily walks the storage tree yielding logical ids.

    Each walk() call starts a fresh traversal. Directory handles are opened one
    level at a time, so memory grows with tree depth, not with the number of
    stored files.
    """

    def __init__(self, fs: FileSystem, root: str, sharded: bool) -> None:
        self._fs = fs
        self._root = root
        self._sharded = sharded

    def walk(self, prefix: str | None = None) -> Iterator[str]:
        """Yield every stored id, optionally only those starting with prefix.

        A record caught between the write and cleanup steps of a compressing
        store has both files on disk and is yielded twice.
        """
        if not self._sharded:
            yield from self._walk_files(self._root, self._root, prefix)
            return

        for entry in self._fs.scandir(self._root):
            if entry.is_dir(follow_symlinks=False):
                # Shard tokens are unrelated to the id text: never prune by prefix
                yield from self._walk_files(entry.path, entry.path, prefix)
            else:
                yield from self._matching(entry.name, prefix)

    def _walk_files(self, folder: str, base: str, prefix: str | None) -> Iterator[str]:
        for entry in self._fs.scandir(folder):
            if entry.is_dir(follow_symlinks=False):
                yield from self._walk_files(entry.path, base, prefix)
            else:
                yield from self._matching(os.path.relpath(entry.path, base), prefix)

    def _matching(self, relative_path: str, prefix: str | None) -> Iterator[str]:
        file_id = file_id_from_relative_path(relative_path)
        if not prefix or file_id.startswith(prefix):
            yield file_id
