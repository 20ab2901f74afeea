# src/content_storage/core/storage/base.py
"""
Content storage contract shared by every backend.

Records are addressed by an opaque id (typically a content hash computed by
the caller). Backends conform structurally; there is no base class to inherit.
"""

from collections.abc import Iterable, Iterator
from typing import BinaryIO, Protocol, runtime_checkable

from content_storage.contracts.data import FileInfo
from content_storage.core.content_item import ContentItem


@runtime_checkable
class ContentStorage(Protocol):
    """Protocol for content storage backends.

    Absence is never an error: lookups return None or False.
    """

    def store_stream(self, file_id: str, content: BinaryIO) -> None:
        """Store a stream under an id, fully replacing any previous record.

        Args:
            file_id: Record id
            content: Readable binary stream, consumed to EOF
        """
        ...

    def store_stream_and_compress(self, file_id: str, content: BinaryIO) -> None:
        """Store a stream, compressing it if the backend supports it and it pays off."""
        ...

    def retrieve(self, file_id: str) -> ContentItem | None:
        """Retrieve a record.

        Returns:
            ContentItem, or None if not found
        """
        ...

    def exist(self, file_id: str) -> bool:
        """Check if a record exists."""
        ...

    def exist_multiple(self, file_ids: Iterable[str]) -> dict[str, bool]:
        """Check existence of several ids.

        Not a consistent snapshot: each id is checked independently.
        """
        ...

    def delete(self, file_ids: Iterable[str]) -> None:
        """Delete records. Missing ids are ignored."""
        ...

    def file_info(self, file_id: str) -> FileInfo | None:
        """Metadata of a record without opening it, None if not found."""
        ...

    def file_info_multiple(self, file_ids: Iterable[str]) -> dict[str, FileInfo | None]:
        """Metadata of several ids."""
        ...

    def all_file_ids(self, prefix: str | None = None) -> Iterator[str]:
        """Lazily iterate stored ids, optionally filtered by prefix."""
        ...
