"""Shared contracts for types crossing the storage boundary.

Import pattern:
    from content_storage.contracts import Encoding, FileInfo, PathTraversalError
"""

from content_storage.contracts.data import FileInfo
from content_storage.contracts.enums import Encoding
from content_storage.contracts.errors import ContentStorageError, PathTraversalError

__all__ = [
    "ContentStorageError",
    "Encoding",
    "FileInfo",
    "PathTraversalError",
]
