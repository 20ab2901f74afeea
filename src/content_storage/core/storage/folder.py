# src/content_storage/core/storage/folder.py
"""Folder-based content storage on the local filesystem.

Structure: root/<shard>/<id> for plain records and root/<shard>/<id>.gzip for
compressed ones. A record is stored in one form only; reads try gzip first so
that during the short window of a compressing store (both files present) the
compressed copy wins deterministically.

Failure policy:
- Path traversal on writes and deletes raises PathTraversalError.
- Read-path errors (stat/open faults, bad ids) are logged and reported as
  not found. Permission errors and missing files therefore look the same to
  callers; the log carries the difference.
- A store whose source stream fails removes its partial file and re-raises.
- Compression failures are logged; the plain copy stays the only record.
- Cleanup of stale files is best-effort: failures are logged, never raised.
"""

import shutil
from collections.abc import Iterable, Iterator
from typing import BinaryIO

from content_storage.contracts.data import FileInfo
from content_storage.contracts.enums import Encoding
from content_storage.contracts.errors import PathTraversalError
from content_storage.core.compression import GZIP_SUFFIX, compress_content_file
from content_storage.core.content_item import ContentItem
from content_storage.core.fs import FileSystem, LocalFileSystem
from content_storage.core.logging import get_logger
from content_storage.core.paths import PathResolver
from content_storage.core.walker import DirectoryWalker

logger = get_logger(__name__)

# Probe order: compressed representation first
_PROBE_ORDER: tuple[Encoding | None, ...] = (Encoding.GZIP, None)

_COPY_CHUNK_SIZE = 64 * 1024


def _suffix_for(encoding: Encoding | None) -> str:
    return GZIP_SUFFIX if encoding == Encoding.GZIP else ""


class FolderContentStorage:
    """ContentStorage implementation over a directory tree."""

    def __init__(self, fs: FileSystem, resolver: PathResolver) -> None:
        """Initialize storage.

        Use create_folder_based_storage() to also create the root directory.

        Args:
            fs: Filesystem capability
            resolver: Id to path resolver bound to the storage root
        """
        self._fs = fs
        self._resolver = resolver
        self._walker = DirectoryWalker(fs, resolver.root, resolver.sharded)

    @property
    def root(self) -> str:
        return self._resolver.root

    def _unlink_quietly(self, path: str) -> None:
        """Best-effort delete; missing files are expected and not logged."""
        try:
            self._fs.unlink(path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning("Failed to remove file", path=path, error=str(e))

    def _probe(self, file_id: str) -> tuple[str, FileInfo] | None:
        """Find the current physical representation of an id.

        Raises:
            PathTraversalError: If the id escapes the root
            OSError: For stat failures other than a missing file
        """
        base_path = self._resolver.resolve(file_id)
        for encoding in _PROBE_ORDER:
            path = base_path + _suffix_for(encoding)
            try:
                stat = self._fs.stat(path)
            except FileNotFoundError:
                continue
            return path, FileInfo(size=stat.st_size, encoding=encoding)
        return None

    def _safe_probe(self, file_id: str) -> tuple[str, FileInfo] | None:
        try:
            return self._probe(file_id)
        except (PathTraversalError, OSError) as e:
            logger.error("Failed to look up content", file_id=file_id, error=str(e))
            return None

    def store_stream(self, file_id: str, content: BinaryIO) -> None:
        """Write a stream to the plain path, replacing any previous record."""
        path = self._resolver.resolve(file_id)
        try:
            with self._fs.open_write(path) as destination:
                shutil.copyfileobj(content, destination, _COPY_CHUNK_SIZE)
        except BaseException:
            # A partial file must not read back as a stored record
            self._unlink_quietly(path)
            raise
        # A previous compressed version would shadow the new plain file on reads
        self._unlink_quietly(path + GZIP_SUFFIX)

    def store_stream_and_compress(self, file_id: str, content: BinaryIO) -> None:
        """Store a stream and keep a gzip copy instead if it saves enough space."""
        self.store_stream(file_id, content)
        path = self._resolver.resolve(file_id)
        try:
            compressed = compress_content_file(path, self._fs)
        except OSError as e:
            logger.warning(
                "Compression failed, keeping plain copy",
                file_id=file_id,
                error=str(e),
            )
            return
        if compressed:
            found = self._safe_probe(file_id)
            if found is not None and found[1].encoding == Encoding.GZIP:
                self._unlink_quietly(path)

    def retrieve(self, file_id: str) -> ContentItem | None:
        found = self._safe_probe(file_id)
        if found is None:
            return None
        path, info = found
        return ContentItem(lambda: self._fs.open_read(path), info.size, info.encoding)

    def exist(self, file_id: str) -> bool:
        return self._safe_probe(file_id) is not None

    def exist_multiple(self, file_ids: Iterable[str]) -> dict[str, bool]:
        return {file_id: self.exist(file_id) for file_id in file_ids}

    def delete(self, file_ids: Iterable[str]) -> None:
        """Remove both possible files of every id.

        Raises:
            PathTraversalError: If an id escapes the root
        """
        for file_id in file_ids:
            path = self._resolver.resolve(file_id)
            self._unlink_quietly(path)
            self._unlink_quietly(path + GZIP_SUFFIX)

    def file_info(self, file_id: str) -> FileInfo | None:
        found = self._safe_probe(file_id)
        return found[1] if found is not None else None

    def file_info_multiple(self, file_ids: Iterable[str]) -> dict[str, FileInfo | None]:
        return {file_id: self.file_info(file_id) for file_id in file_ids}

    def all_file_ids(self, prefix: str | None = None) -> Iterator[str]:
        return self._walker.walk(prefix)


def create_folder_based_storage(
    root: str,
    fs: FileSystem | None = None,
    disable_prefix_hash: bool = False,
) -> FolderContentStorage:
    """Create a folder-based storage rooted at root, creating the directory.

    Args:
        root: Storage root directory
        fs: Filesystem capability (defaults to the local filesystem)
        disable_prefix_hash: Store files directly under root without sharding
    """
    fs = fs if fs is not None else LocalFileSystem()
    resolver = PathResolver(fs, str(root), disable_prefix_hash=disable_prefix_hash)
    fs.makedirs(resolver.root)
    return FolderContentStorage(fs, resolver)
