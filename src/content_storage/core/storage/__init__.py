"""Storage backends and the factory selecting one from settings."""

from typing import TYPE_CHECKING, Any

from content_storage.core.fs import FileSystem
from content_storage.core.storage.base import ContentStorage
from content_storage.core.storage.folder import (
    FolderContentStorage,
    create_folder_based_storage,
)
from content_storage.core.storage.memory import InMemoryContentStorage
from content_storage.core.storage.s3 import S3ContentStorage, create_aws_s3_storage

if TYPE_CHECKING:
    from content_storage.core.config import StorageSettings


def create_storage(
    settings: "StorageSettings",
    *,
    fs: FileSystem | None = None,
    s3_client: Any | None = None,
) -> ContentStorage:
    """Create the backend selected by settings.backend.

    Args:
        settings: Validated storage settings
        fs: Filesystem capability for the filesystem backend
        s3_client: Pre-built S3 client for the s3 backend

    Raises:
        ValueError: If the backend is not known
    """
    if settings.backend == "filesystem":
        return create_folder_based_storage(
            str(settings.filesystem.root_path),
            fs=fs,
            disable_prefix_hash=settings.filesystem.disable_prefix_hash,
        )
    if settings.backend == "s3":
        if settings.s3 is None:
            raise ValueError("S3 backend selected without s3 settings")
        return create_aws_s3_storage(settings.s3, client=s3_client)
    if settings.backend == "memory":
        return InMemoryContentStorage()
    raise ValueError(f"Unknown storage backend: {settings.backend}")


__all__ = [
    "ContentStorage",
    "FolderContentStorage",
    "InMemoryContentStorage",
    "S3ContentStorage",
    "create_aws_s3_storage",
    "create_folder_based_storage",
    "create_storage",
]
