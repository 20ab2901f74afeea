"""Content-addressable blob storage with filesystem, S3 and in-memory backends."""

__version__ = "0.1.0"
