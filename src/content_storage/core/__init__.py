"""Core infrastructure: Storage backends, Compression, Configuration, Logging."""

from content_storage.core.compression import (
    CompressionResult,
    compress_content_file,
    gzip_compress_file,
)
from content_storage.core.config import (
    FolderStorageSettings,
    LoggingSettings,
    S3StorageSettings,
    StorageSettings,
    load_settings,
)
from content_storage.core.content_item import (
    ContentItem,
    bytes_to_stream,
    stream_to_bytes,
)
from content_storage.core.fs import FileSystem, LocalFileSystem
from content_storage.core.logging import configure_logging, get_logger
from content_storage.core.paths import PathResolver
from content_storage.core.storage import (
    ContentStorage,
    FolderContentStorage,
    InMemoryContentStorage,
    S3ContentStorage,
    create_aws_s3_storage,
    create_folder_based_storage,
    create_storage,
)
from content_storage.core.walker import DirectoryWalker

__all__ = [
    "CompressionResult",
    "ContentItem",
    "ContentStorage",
    "DirectoryWalker",
    "FileSystem",
    "FolderContentStorage",
    "FolderStorageSettings",
    "InMemoryContentStorage",
    "LocalFileSystem",
    "LoggingSettings",
    "PathResolver",
    "S3ContentStorage",
    "S3StorageSettings",
    "StorageSettings",
    "bytes_to_stream",
    "compress_content_file",
    "configure_logging",
    "create_aws_s3_storage",
    "create_folder_based_storage",
    "create_storage",
    "get_logger",
    "gzip_compress_file",
    "load_settings",
    "stream_to_bytes",
]
