# src/content_storage/core/content_item.py
"""Lazy view over a retrieved record.

A ContentItem caches the stream factory, not a stream: every call to
as_stream() or as_raw_stream() opens a fresh, independent stream.
"""

import gzip
import io
from collections.abc import Callable
from typing import BinaryIO

from content_storage.contracts.enums import Encoding

StreamFactory = Callable[[], BinaryIO]


class _ClosingGzipFile(gzip.GzipFile):
    """GzipFile reader that also closes the raw stream it decodes."""

    def __init__(self, raw: BinaryIO) -> None:
        self._raw = raw
        super().__init__(fileobj=raw, mode="rb")

    def close(self) -> None:
        try:
            super().close()
        finally:
            self._raw.close()


class ContentItem:
    """A retrieved record.

    size and encoding describe the stored representation, so for gzip records
    size is the compressed size, not the length of as_stream().
    """

    def __init__(
        self,
        stream_factory: StreamFactory,
        size: int | None,
        encoding: Encoding | None,
    ) -> None:
        self._stream_factory = stream_factory
        self.size = size
        self.encoding = encoding

    @classmethod
    def from_bytes(cls, data: bytes) -> "ContentItem":
        """Build an item over an in-memory buffer (plain encoding)."""
        return cls(lambda: bytes_to_stream(data), len(data), None)

    def as_stream(self) -> BinaryIO:
        """Open the content, decompressed if stored with gzip."""
        stream = self._stream_factory()
        if self.encoding == Encoding.GZIP:
            return _ClosingGzipFile(stream)
        return stream

    def as_raw_stream(self) -> BinaryIO:
        """Open the content exactly as stored.

        Callers must interpret self.encoding themselves.
        """
        return self._stream_factory()

    def __repr__(self) -> str:
        return f"ContentItem(size={self.size!r}, encoding={self.encoding!r})"


def bytes_to_stream(data: bytes) -> BinaryIO:
    """Wrap bytes in a readable binary stream."""
    return io.BytesIO(bytes(data))


def stream_to_bytes(stream: BinaryIO) -> bytes:
    """Read a stream to EOF and close it."""
    with stream:
        return stream.read()
