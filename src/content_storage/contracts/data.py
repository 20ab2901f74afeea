"""Metadata types returned by storage backends."""

from dataclasses import dataclass

from content_storage.contracts.enums import Encoding


@dataclass(frozen=True)
class FileInfo:
    """Metadata of a stored record, read without opening its stream.

    Attributes:
        size: Bytes of the stored (physical) representation, None if the
            backend cannot report it
        encoding: Encoding of the stored bytes, None for plain content
    """

    size: int | None
    encoding: Encoding | None = None

    @property
    def is_compressed(self) -> bool:
        """Whether the stored bytes need decoding before use."""
        return self.encoding is not None
