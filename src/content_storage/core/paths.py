# src/content_storage/core/paths.py
"""Mapping of logical ids to physical paths.

Files are sharded using the first 4 hex digits of sha1(id) so that millions of
records do not land in a single directory. Assuming a uniform hash
distribution this divides the per-directory file count by 16^4.

Structure: root/9584/some-id (or root/some-id when sharding is disabled)
"""

import hashlib
import os

from content_storage.contracts.errors import PathTraversalError
from content_storage.core.fs import FileSystem

SHARD_LENGTH = 4


def shard_for(file_id: str) -> str:
    """Shard directory name for an id.

    Example:
        >>> shard_for("some-id")
        '9584'
    """
    return hashlib.sha1(file_id.encode("utf-8")).hexdigest()[:SHARD_LENGTH]


def strip_trailing_separators(root: str) -> str:
    """Remove trailing path separators, keeping a bare filesystem root intact."""
    stripped = root.rstrip("/" + os.sep)
    return stripped or root[:1]


class PathResolver:
    """Resolves ids to paths inside the storage root.

    Resolution creates the destination directory on demand but never touches
    the target file itself.
    """

    def __init__(
        self,
        fs: FileSystem,
        root: str,
        disable_prefix_hash: bool = False,
    ) -> None:
        """Initialize resolver.

        Args:
            fs: Filesystem used to create directories
            root: Storage root directory
            disable_prefix_hash: Store files directly under root (no shards)
        """
        self._fs = fs
        self._root = strip_trailing_separators(root)
        self._sharded = not disable_prefix_hash

    @property
    def root(self) -> str:
        return self._root

    @property
    def sharded(self) -> bool:
        return self._sharded

    def base_directory(self, file_id: str) -> str:
        """Directory that must contain the file for an id."""
        if self._sharded:
            return os.path.join(self._root, shard_for(file_id))
        return self._root

    def resolve(self, file_id: str) -> str:
        """Return the plain (uncompressed) path for an id.

        Raises:
            PathTraversalError: If the normalized path escapes the base directory
        """
        base = os.path.normpath(self.base_directory(file_id))
        path = os.path.normpath(os.path.join(base, file_id))

        # Must be strictly below base; base itself is a directory, not a record
        prefix = base if base.endswith(os.sep) else base + os.sep
        if not path.startswith(prefix):
            raise PathTraversalError(file_id, self._root)

        self._fs.makedirs(os.path.dirname(path))
        return path
