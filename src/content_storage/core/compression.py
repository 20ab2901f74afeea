# src/content_storage/core/compression.py
"""Store-time gzip compression of content files.

A compressed copy is only kept when it saves at least ~10% of the original
size. Below that margin the CPU spent decompressing on every read is not worth
the space saved, so the compressed file is discarded.
"""

import gzip
import os
import shutil
from dataclasses import dataclass

from content_storage.core.fs import FileSystem
from content_storage.core.logging import get_logger

logger = get_logger(__name__)

GZIP_SUFFIX = ".gzip"

# compressed_size * MIN_COMPRESSION_GAIN must not exceed original_size
MIN_COMPRESSION_GAIN = 1.1

# zlib's default level; keeps output byte-identical to stock gzip streams
COMPRESSION_LEVEL = 6

_CHUNK_SIZE = 64 * 1024


def _discard(path: str, fs: FileSystem) -> None:
    """Best-effort delete of a compressed file that must not be kept."""
    try:
        fs.unlink(path)
    except FileNotFoundError:
        pass
    except OSError as e:
        # A leftover file is overwritten by the next compression
        logger.warning("Failed to discard compressed file", path=path, error=str(e))


@dataclass(frozen=True)
class CompressionResult:
    """Sizes of a kept compression."""

    original_size: int
    compressed_size: int


def gzip_compress_file(
    input_path: str,
    output_path: str,
    fs: FileSystem,
) -> CompressionResult | None:
    """Compress input_path into output_path with gzip.

    The input file is never deleted; replacing it with the compressed copy is
    the caller's decision.

    Args:
        input_path: File to compress
        output_path: Destination of the compressed bytes (overwritten)
        fs: Filesystem to read and write through

    Returns:
        CompressionResult if the compressed file was kept, None if the gain was
        below the threshold and the compressed file was discarded

    Raises:
        ValueError: If input and output are the same file
        OSError: If reading or writing fails; the partial output is removed
    """
    if os.path.abspath(input_path) == os.path.abspath(output_path):
        raise ValueError(f"Can't compress a file into itself: {input_path}")

    try:
        with fs.open_read(input_path) as source, fs.open_write(output_path) as destination:
            # Empty filename and fixed mtime: no per-file metadata in the header
            with gzip.GzipFile(
                filename="",
                mode="wb",
                compresslevel=COMPRESSION_LEVEL,
                fileobj=destination,
                mtime=0,
            ) as encoder:
                shutil.copyfileobj(source, encoder, _CHUNK_SIZE)
    except OSError:
        # A truncated gzip file would shadow the plain one on reads
        _discard(output_path, fs)
        raise

    original_size = fs.stat(input_path).st_size
    compressed_size = fs.stat(output_path).st_size

    if compressed_size * MIN_COMPRESSION_GAIN > original_size:
        _discard(output_path, fs)
        return None

    return CompressionResult(
        original_size=original_size,
        compressed_size=compressed_size,
    )


def compress_content_file(content_file_path: str, fs: FileSystem) -> bool:
    """Compress a stored content file next to itself.

    Returns:
        True if path + GZIP_SUFFIX now holds a worthwhile compressed copy
    """
    result = gzip_compress_file(content_file_path, content_file_path + GZIP_SUFFIX, fs)
    if result is not None:
        logger.debug(
            "Compressed content file",
            path=content_file_path,
            original_size=result.original_size,
            compressed_size=result.compressed_size,
        )
    return result is not None
