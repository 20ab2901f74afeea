"""Error types raised across the storage boundary.

Only input-contract violations are raised to callers. Missing records are
reported as None/False and never as exceptions.
"""


class ContentStorageError(Exception):
    """Base class for content storage errors."""


class PathTraversalError(ContentStorageError, ValueError):
    """Raised when an id would resolve to a path outside the storage root."""

    def __init__(self, file_id: str, root: str) -> None:
        self.file_id = file_id
        self.root = root
        super().__init__(f"Id {file_id!r} resolves outside of storage root {root!r}")
