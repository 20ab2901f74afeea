"""Encodings used across storage backends."""

from enum import Enum


class Encoding(str, Enum):
    """Physical representation of a stored record.

    Uses (str, Enum) so values compare equal to the raw strings reported by
    object stores (e.g. S3 ContentEncoding) and the on-disk suffix.
    Plain records have no encoding (None), so there is no PLAIN member.
    """

    GZIP = "gzip"
