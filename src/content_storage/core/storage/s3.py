# src/content_storage/core/storage/s3.py
"""S3-backed content storage.

Maps the storage contract 1:1 onto object operations. Compression is not done
client-side: store_stream_and_compress uploads the bytes as they are, and the
encoding reported on reads is whatever ContentEncoding the object carries.
"""

from collections.abc import Iterable, Iterator
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING, Any, BinaryIO

from botocore.exceptions import ClientError

from content_storage.contracts.data import FileInfo
from content_storage.contracts.enums import Encoding
from content_storage.core.content_item import ContentItem
from content_storage.core.logging import get_logger

if TYPE_CHECKING:
    from content_storage.core.config import S3StorageSettings

logger = get_logger(__name__)

# S3 DeleteObjects accepts at most 1000 keys per request
_DELETE_BATCH_SIZE = 1000

_NOT_FOUND_CODES = frozenset({"404", "NoSuchKey", "NotFound"})


def _is_not_found(error: ClientError) -> bool:
    return str(error.response.get("Error", {}).get("Code")) in _NOT_FOUND_CODES


def _parse_encoding(value: str | None) -> Encoding | None:
    if not value:
        return None
    try:
        return Encoding(value)
    except ValueError:
        # Unknown encodings are passed through undecoded
        logger.warning("Unsupported content encoding", encoding=value)
        return None


class S3ContentStorage:
    """ContentStorage implementation over an S3 bucket.

    The client is injected: anything exposing the boto3 S3 client methods
    head_object, get_object, put_object, delete_objects and list_objects_v2.
    """

    def __init__(
        self,
        client: Any,
        bucket: str,
        key_prefix: str = "",
        max_workers: int = 8,
    ) -> None:
        """Initialize storage.

        Args:
            client: boto3 S3 client (or compatible)
            bucket: Bucket name
            key_prefix: Prefix prepended to ids to build object keys
            max_workers: Threads used by batch lookups
        """
        self._client = client
        self._bucket = bucket
        self._key_prefix = key_prefix
        self._max_workers = max_workers

    def _key(self, file_id: str) -> str:
        return self._key_prefix + file_id

    def _head(self, file_id: str) -> dict[str, Any] | None:
        try:
            return self._client.head_object(Bucket=self._bucket, Key=self._key(file_id))
        except ClientError as e:
            if not _is_not_found(e):
                logger.error("Failed to look up object", file_id=file_id, error=str(e))
            return None

    def _open(self, file_id: str) -> BinaryIO:
        response = self._client.get_object(Bucket=self._bucket, Key=self._key(file_id))
        return response["Body"]

    def _fan_out(self, func: Any, file_ids: Iterable[str]) -> dict[str, Any]:
        ids = list(dict.fromkeys(file_ids))
        if not ids:
            return {}
        with ThreadPoolExecutor(max_workers=min(self._max_workers, len(ids))) as pool:
            return dict(zip(ids, pool.map(func, ids), strict=True))

    def store_stream(self, file_id: str, content: BinaryIO) -> None:
        self._client.put_object(Bucket=self._bucket, Key=self._key(file_id), Body=content)

    def store_stream_and_compress(self, file_id: str, content: BinaryIO) -> None:
        self.store_stream(file_id, content)

    def retrieve(self, file_id: str) -> ContentItem | None:
        info = self.file_info(file_id)
        if info is None:
            return None
        return ContentItem(lambda: self._open(file_id), info.size, info.encoding)

    def exist(self, file_id: str) -> bool:
        return self._head(file_id) is not None

    def exist_multiple(self, file_ids: Iterable[str]) -> dict[str, bool]:
        return self._fan_out(self.exist, file_ids)

    def delete(self, file_ids: Iterable[str]) -> None:
        keys = [{"Key": self._key(file_id)} for file_id in file_ids]
        for start in range(0, len(keys), _DELETE_BATCH_SIZE):
            self._client.delete_objects(
                Bucket=self._bucket,
                Delete={"Objects": keys[start : start + _DELETE_BATCH_SIZE], "Quiet": True},
            )

    def file_info(self, file_id: str) -> FileInfo | None:
        head = self._head(file_id)
        if head is None:
            return None
        return FileInfo(
            size=head.get("ContentLength"),
            encoding=_parse_encoding(head.get("ContentEncoding")),
        )

    def file_info_multiple(self, file_ids: Iterable[str]) -> dict[str, FileInfo | None]:
        return self._fan_out(self.file_info, file_ids)

    def all_file_ids(self, prefix: str | None = None) -> Iterator[str]:
        """Page through bucket listings, yielding ids with the key prefix removed."""
        request: dict[str, Any] = {
            "Bucket": self._bucket,
            "Prefix": self._key_prefix + (prefix or ""),
        }
        while True:
            response = self._client.list_objects_v2(**request)
            for obj in response.get("Contents", []):
                yield obj["Key"][len(self._key_prefix) :]
            if not response.get("IsTruncated"):
                return
            request["ContinuationToken"] = response["NextContinuationToken"]


def create_aws_s3_storage(
    settings: "S3StorageSettings",
    client: Any | None = None,
) -> S3ContentStorage:
    """Create S3 storage from settings, building a boto3 client if none is given."""
    if client is None:
        import boto3

        client = boto3.client(
            "s3",
            region_name=settings.region,
            endpoint_url=settings.endpoint_url,
        )
    return S3ContentStorage(
        client,
        bucket=settings.bucket,
        key_prefix=settings.key_prefix,
        max_workers=settings.max_workers,
    )
