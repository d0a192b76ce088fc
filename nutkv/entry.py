"""Data entries and their on-disk encoding.

Stored layout, little endian::

    crc u32 | timestamp u64 | key size u32 | value size u32 | flag u16 |
    ttl u32 | bucket size u32 | status u16 | ds u16 | tx id u64 |
    bucket | key | value
"""

from __future__ import annotations

import struct
import zlib
from dataclasses import dataclass, field

from .errors import NutsError

_HEADER = struct.Struct("<IQIIHIIHHQ")

DATA_ENTRY_HEADER_SIZE = _HEADER.size


class PayloadSizeMismatchError(NutsError):
    """The payload size in the metadata differs from the size available."""

    def __init__(
        self,
        message: str = "the payload size in meta mismatch with the payload size needed",
    ) -> None:
        super().__init__(message)


@dataclass
class MetaData:
    """Meta information of a data item."""

    key_size: int = 0
    value_size: int = 0
    timestamp: int = 0
    ttl: int = 0
    flag: int = 0
    bucket_size: int = 0
    tx_id: int = 0
    status: int = 0
    ds: int = 0
    crc: int = 0

    def payload_size(self) -> int:
        """Total size of bucket, key and value."""
        return self.bucket_size + self.key_size + self.value_size


@dataclass
class Hint:
    """Index record pointing at a key's data."""

    key: bytes = b""
    file_id: int = 0
    meta: MetaData | None = None
    data_pos: int = 0


def _fit(data: bytes, size: int) -> bytes:
    return data[:size].ljust(size, b"\x00")


@dataclass
class Entry:
    """A data item: key, value, bucket and metadata."""

    key: bytes = b""
    value: bytes = b""
    bucket: bytes = b""
    meta: MetaData = field(default_factory=MetaData)

    def size(self) -> int:
        """Encoded size of the entry in bytes."""
        return DATA_ENTRY_HEADER_SIZE + self.meta.payload_size()

    def _header(self) -> bytes:
        m = self.meta
        return _HEADER.pack(
            m.crc,
            m.timestamp,
            m.key_size,
            m.value_size,
            m.flag,
            m.ttl,
            m.bucket_size,
            m.status,
            m.ds,
            m.tx_id,
        )

    def encode(self) -> bytes:
        """Encode the entry with its checksum in front."""
        m = self.meta
        body = (
            self._header()[4:]
            + _fit(self.bucket, m.bucket_size)
            + _fit(self.key, m.key_size)
            + _fit(self.value, m.value_size)
        )
        return struct.pack("<I", zlib.crc32(body)) + body

    def is_zero(self) -> bool:
        """True if the entry carries no data."""
        m = self.meta
        return m.crc == 0 and m.key_size == 0 and m.value_size == 0 and m.timestamp == 0

    def get_crc(self, buf: bytes) -> int:
        """Checksum of the header in ``buf`` followed by bucket, key and value."""
        crc = zlib.crc32(bytes(buf[4:]))
        for part in (self.bucket, self.key, self.value):
            crc = zlib.crc32(part, crc)
        return crc

    def parse_payload(self, data: bytes) -> None:
        """Split ``data`` into bucket, key and value using the metadata sizes."""
        m = self.meta
        key_start = m.bucket_size
        value_start = key_start + m.key_size
        value_end = value_start + m.value_size
        self.bucket = bytes(data[:key_start])
        self.key = bytes(data[key_start:value_start])
        self.value = bytes(data[value_start:value_end])

    def check_payload_size(self, size: int) -> None:
        """Raise PayloadSizeMismatchError unless the payload has ``size`` bytes."""
        if self.meta.payload_size() != size:
            raise PayloadSizeMismatchError()

    def parse_meta(self, buf: bytes) -> None:
        """Read the metadata from an encoded header."""
        if len(buf) < DATA_ENTRY_HEADER_SIZE:
            raise ValueError(
                f"header needs {DATA_ENTRY_HEADER_SIZE} bytes, got {len(buf)}"
            )
        (
            crc,
            timestamp,
            key_size,
            value_size,
            flag,
            ttl,
            bucket_size,
            status,
            ds,
            tx_id,
        ) = _HEADER.unpack_from(bytes(buf[:DATA_ENTRY_HEADER_SIZE]))
        self.meta = MetaData(
            key_size=key_size,
            value_size=value_size,
            timestamp=timestamp,
            ttl=ttl,
            flag=flag,
            bucket_size=bucket_size,
            tx_id=tx_id,
            status=status,
            ds=ds,
            crc=crc,
        )