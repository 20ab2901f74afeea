# tests/conftest.py
"""Shared test fixtures and helpers.

Hypothesis Configuration:
- "ci" profile: Fast tests for CI (100 examples) - default
- "nightly" profile: Thorough tests (1000 examples)
- "debug" profile: Minimal tests with verbose output (10 examples)

Set profile via environment variable:
    HYPOTHESIS_PROFILE=nightly pytest tests/property/
"""

import io
import logging
import os
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest
import structlog
from botocore.exceptions import ClientError
from hypothesis import HealthCheck, Phase, Verbosity, settings

from content_storage.core.fs import LocalFileSystem
from content_storage.core.logging import StderrHandler
from content_storage.core.storage.folder import (
    FolderContentStorage,
    create_folder_based_storage,
)

# =============================================================================
# Hypothesis Configuration
# =============================================================================

# Property tests reuse tmp_path-backed fixtures across examples
_SUPPRESSED = [HealthCheck.function_scoped_fixture]

settings.register_profile(
    "ci",
    max_examples=100,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
    suppress_health_check=_SUPPRESSED,
)

settings.register_profile(
    "nightly",
    max_examples=1000,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
    suppress_health_check=_SUPPRESSED,
)

settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
    suppress_health_check=_SUPPRESSED,
)

settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "ci"))


class FailingWriter:
    """Binary writer that raises once more than limit bytes were written."""

    def __init__(self, path: str, error: OSError, limit: int) -> None:
        self._file = open(path, "wb")
        self._error = error
        self._remaining = limit

    def write(self, data: Any) -> int:
        chunk = bytes(data)
        if len(chunk) > self._remaining:
            self._file.write(chunk[: self._remaining])
            self._remaining = 0
            raise self._error
        self._remaining -= len(chunk)
        return self._file.write(chunk)

    def flush(self) -> None:
        self._file.flush()

    def close(self) -> None:
        self._file.close()

    def __enter__(self) -> "FailingWriter":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


class FlakyFileSystem(LocalFileSystem):
    """LocalFileSystem that fails selected operations with a given error.

    Paths in write_errors accept write_limit bytes, then raise (a full disk).
    """

    def __init__(self) -> None:
        self.stat_errors: dict[str, OSError] = {}
        self.unlink_errors: dict[str, OSError] = {}
        self.write_errors: dict[str, OSError] = {}
        self.write_limit = 10

    def open_write(self, path: str) -> Any:
        if path in self.write_errors:
            return FailingWriter(path, self.write_errors[path], self.write_limit)
        return super().open_write(path)

    def stat(self, path: str) -> os.stat_result:
        if path in self.stat_errors:
            raise self.stat_errors[path]
        return super().stat(path)

    def unlink(self, path: str) -> None:
        if path in self.unlink_errors:
            raise self.unlink_errors[path]
        super().unlink(path)


@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    """Undo configure_logging() after each test."""
    yield
    structlog.reset_defaults()
    root = logging.getLogger()
    for handler in root.handlers[:]:
        if isinstance(handler, StderrHandler):
            root.removeHandler(handler)
    root.setLevel(logging.WARNING)


@pytest.fixture
def storage_root(tmp_path: Path) -> Path:
    return tmp_path / "contents"


@pytest.fixture
def folder_storage(storage_root: Path) -> Iterator[FolderContentStorage]:
    yield create_folder_based_storage(str(storage_root))


@pytest.fixture
def flaky_fs() -> FlakyFileSystem:
    return FlakyFileSystem()


class FakeS3Client:
    """In-process stand-in for a boto3 S3 client.

    Implements the subset of calls used by S3ContentStorage. Listing is paged
    with page_size keys per response to exercise continuation tokens.
    """

    def __init__(self, page_size: int = 1000) -> None:
        self.objects: dict[str, tuple[bytes, str | None]] = {}
        self.page_size = page_size
        self.head_errors: dict[str, str] = {}
        self.delete_calls: list[list[str]] = []

    @staticmethod
    def _error(code: str, operation: str) -> ClientError:
        return ClientError({"Error": {"Code": code, "Message": code}}, operation)

    def put_object(self, Bucket: str, Key: str, Body: Any, **kwargs: Any) -> dict[str, Any]:
        data = Body if isinstance(Body, bytes) else Body.read()
        self.objects[Key] = (data, kwargs.get("ContentEncoding"))
        return {}

    def head_object(self, Bucket: str, Key: str) -> dict[str, Any]:
        if Key in self.head_errors:
            raise self._error(self.head_errors[Key], "HeadObject")
        if Key not in self.objects:
            raise self._error("404", "HeadObject")
        data, encoding = self.objects[Key]
        response: dict[str, Any] = {"ContentLength": len(data)}
        if encoding:
            response["ContentEncoding"] = encoding
        return response

    def get_object(self, Bucket: str, Key: str) -> dict[str, Any]:
        if Key not in self.objects:
            raise self._error("NoSuchKey", "GetObject")
        return {"Body": io.BytesIO(self.objects[Key][0])}

    def delete_objects(self, Bucket: str, Delete: dict[str, Any]) -> dict[str, Any]:
        keys = [obj["Key"] for obj in Delete["Objects"]]
        self.delete_calls.append(keys)
        for key in keys:
            self.objects.pop(key, None)
        return {}

    def list_objects_v2(
        self,
        Bucket: str,
        Prefix: str = "",
        ContinuationToken: str | None = None,
    ) -> dict[str, Any]:
        keys = sorted(k for k in self.objects if k.startswith(Prefix))
        start = int(ContinuationToken) if ContinuationToken else 0
        page = keys[start : start + self.page_size]
        response: dict[str, Any] = {
            "Contents": [{"Key": k, "Size": len(self.objects[k][0])} for k in page],
            "IsTruncated": start + self.page_size < len(keys),
        }
        if response["IsTruncated"]:
            response["NextContinuationToken"] = str(start + self.page_size)
        return response


@pytest.fixture
def fake_s3_client() -> FakeS3Client:
    return FakeS3Client()
