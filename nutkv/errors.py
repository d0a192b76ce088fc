"""Error types raised by the store and predicates for recognising them."""

from __future__ import annotations


class NutsError(Exception):
    """Base class for all errors raised by the store."""


class DBClosedError(NutsError):
    """The database has been closed."""

    def __init__(self, message: str = "db is closed") -> None:
        super().__init__(message)


class KeyNotFoundError(NutsError):
    """The requested key does not exist."""

    def __init__(self, message: str = "key not found") -> None:
        super().__init__(message)


class BucketNotFoundError(NutsError):
    """The requested bucket does not exist."""

    def __init__(self, message: str = "bucket not found") -> None:
        super().__init__(message)


class BucketEmptyError(NutsError):
    """The bucket holds no data."""

    def __init__(self, message: str = "bucket is empty") -> None:
        super().__init__(message)


class KeyEmptyError(NutsError):
    """An empty key was given."""

    def __init__(self, message: str = "key can not be empty") -> None:
        super().__init__(message)


class PrefixScanError(NutsError):
    """A prefix scan found no result."""

    def __init__(self, message: str = "prefix scans not found") -> None:
        super().__init__(message)


class PrefixSearchScanError(NutsError):
    """A prefix and search scan found no result."""

    def __init__(self, message: str = "prefix and search scans not found") -> None:
        super().__init__(message)


def _chain(err: BaseException | None):
    """Yield ``err`` and every exception it was raised from or during."""
    seen: set[int] = set()
    while err is not None and id(err) not in seen:
        seen.add(id(err))
        yield err
        err = err.__cause__ or err.__context__


def _is(err: BaseException | None, kind: type[BaseException]) -> bool:
    return any(isinstance(e, kind) for e in _chain(err))


def is_db_closed(err: BaseException | None) -> bool:
    """True if the error indicates the db was closed."""
    return _is(err, DBClosedError)


def is_key_not_found(err: BaseException | None) -> bool:
    """True if the error indicates the key is not found."""
    return _is(err, KeyNotFoundError)


def is_bucket_not_found(err: BaseException | None) -> bool:
    """True if the error indicates the bucket does not exist."""
    return _is(err, BucketNotFoundError)


def is_bucket_empty(err: BaseException | None) -> bool:
    """True if the error indicates the bucket is empty."""
    return _is(err, BucketEmptyError)


def is_key_empty(err: BaseException | None) -> bool:
    """True if the error indicates the key is empty."""
    return _is(err, KeyEmptyError)


def is_prefix_scan(err: BaseException | None) -> bool:
    """True if a prefix scan found no result."""
    return _is(err, PrefixScanError)


def is_prefix_search_scan(err: BaseException | None) -> bool:
    """True if a prefix and search scan found no result."""
    return _is(err, PrefixSearchScanError)