# src/content_storage/core/storage/memory.py
"""In-memory content storage for tests and ephemeral use."""

from collections.abc import Iterable, Iterator
from typing import BinaryIO

from content_storage.contracts.data import FileInfo
from content_storage.core.content_item import ContentItem, stream_to_bytes


class InMemoryContentStorage:
    """ContentStorage backed by a dict. Never compresses."""

    def __init__(self) -> None:
        self.storage: dict[str, bytes] = {}

    def store_stream(self, file_id: str, content: BinaryIO) -> None:
        self.storage[file_id] = stream_to_bytes(content)

    def store_stream_and_compress(self, file_id: str, content: BinaryIO) -> None:
        self.store_stream(file_id, content)

    def retrieve(self, file_id: str) -> ContentItem | None:
        data = self.storage.get(file_id)
        return ContentItem.from_bytes(data) if data is not None else None

    def exist(self, file_id: str) -> bool:
        return file_id in self.storage

    def exist_multiple(self, file_ids: Iterable[str]) -> dict[str, bool]:
        return {file_id: file_id in self.storage for file_id in file_ids}

    def delete(self, file_ids: Iterable[str]) -> None:
        for file_id in file_ids:
            self.storage.pop(file_id, None)

    def file_info(self, file_id: str) -> FileInfo | None:
        data = self.storage.get(file_id)
        return FileInfo(size=len(data), encoding=None) if data is not None else None

    def file_info_multiple(self, file_ids: Iterable[str]) -> dict[str, FileInfo | None]:
        return {file_id: self.file_info(file_id) for file_id in file_ids}

    def all_file_ids(self, prefix: str | None = None) -> Iterator[str]:
        # Snapshot keys so callers may delete while iterating
        for key in list(self.storage):
            if not prefix or key.startswith(prefix):
                yield key
