"""Entry encoding, a file-handle cache, errors and in-memory structures for a key/value store."""

__version__ = "0.1.0"