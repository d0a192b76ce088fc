import struct

import pytest

from nutkv.entry import (
    DATA_ENTRY_HEADER_SIZE,
    Entry,
    Hint,
    MetaData,
    PayloadSizeMismatchError,
)

EXPECTED_ENCODE = bytes(
    [
        48, 176, 185, 16, 1, 38, 64, 92, 0, 0, 0, 0, 8, 0, 0, 0, 8, 0, 0, 0,
        1, 0, 0, 0, 0, 0, 10, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0,
        116, 101, 115, 116, 95, 101, 110, 116, 114, 121, 107, 101, 121, 95,
        48, 48, 48, 49, 118, 97, 108, 95, 48, 48, 48, 49,
    ]
)


@pytest.fixture
def entry():
    return Entry(
        key=b"key_0001",
        value=b"val_0001",
        bucket=b"test_entry",
        meta=MetaData(
            key_size=len(b"key_0001"),
            value_size=len(b"val_0001"),
            timestamp=1547707905,
            ttl=0,
            bucket_size=len(b"test_entry"),
            flag=1,
        ),
    )


def test_encode(entry):
    assert entry.encode() == EXPECTED_ENCODE


def test_is_zero(entry):
    assert entry.is_zero() is False
    assert Entry().is_zero() is True


def test_get_crc(entry):
    crc1 = entry.get_crc(EXPECTED_ENCODE[:42])
    crc2 = struct.unpack("<I", EXPECTED_ENCODE[:4])[0]
    assert crc1 == crc2


def test_size(entry):
    assert DATA_ENTRY_HEADER_SIZE == 42
    assert entry.size() == len(EXPECTED_ENCODE)
    assert entry.meta.payload_size() == 26


def test_parse_meta_and_payload_round_trip(entry):
    decoded = Entry()
    decoded.parse_meta(EXPECTED_ENCODE[:DATA_ENTRY_HEADER_SIZE])
    assert decoded.meta.timestamp == 1547707905
    assert decoded.meta.key_size == 8
    assert decoded.meta.bucket_size == 10
    assert decoded.meta.flag == 1
    assert decoded.meta.crc == struct.unpack("<I", EXPECTED_ENCODE[:4])[0]
    decoded.parse_payload(EXPECTED_ENCODE[DATA_ENTRY_HEADER_SIZE:])
    assert decoded.bucket == b"test_entry"
    assert decoded.key == b"key_0001"
    assert decoded.value == b"val_0001"


def test_parse_meta_short_buffer():
    with pytest.raises(ValueError):
        Entry().parse_meta(b"\x00" * 10)


def test_check_payload_size(entry):
    entry.check_payload_size(26)
    with pytest.raises(PayloadSizeMismatchError):
        entry.check_payload_size(25)


def test_encode_reencode_is_stable(entry):
    encoded = entry.encode()
    again = Entry()
    again.parse_meta(encoded)
    again.parse_payload(encoded[DATA_ENTRY_HEADER_SIZE:])
    assert again.encode() == encoded


def test_hint_defaults():
    hint = Hint(key=b"k", file_id=3, data_pos=7)
    assert (hint.key, hint.file_id, hint.meta, hint.data_pos) == (b"k", 3, None, 7)