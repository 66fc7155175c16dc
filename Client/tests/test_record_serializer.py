"""
Tests for the record serializer

Tests the fixed field order, flag encoding, snapshots and corrupt input.
"""

import io
import struct
import sys
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from exceptions import RecordSerializationError
from models import FileMetadataRecord, UNASSIGNED_ID
from serialization import (
    serialize_record,
    deserialize_record,
    write_record,
    read_record,
    write_snapshot,
    read_snapshot,
    SNAPSHOT_MAGIC
)


def _full_record():
    record = FileMetadataRecord("/photos/2024/beach.jpg")
    record.file_id = 12
    record.parent_id = 4
    record.length = 5_000_000_000
    record.creation_timestamp = 1_600_000_000_000
    record.modification_timestamp = 1_700_000_000_000
    record.modification_timestamp_at_last_sync_for_data = 1_650_000_000_000
    record.local_path = "/sdcard/nimbus/photos/2024/beach.jpg"
    record.mime_type = "image/jpeg"
    record.needs_updating = True
    record.keep_in_sync = True
    record.last_sync_date_for_properties = 1_700_000_100_000
    record.last_sync_date_for_data = 1_650_000_100_000
    record.etag = "\"5f3a\""
    return record


def _fields(record):
    return (
        record.file_id,
        record.parent_id,
        record.length,
        record.creation_timestamp,
        record.modification_timestamp,
        record.modification_timestamp_at_last_sync_for_data,
        record.remote_path,
        record.local_path,
        record.mime_type,
        record.needs_updating,
        record.keep_in_sync,
        record.last_sync_date_for_properties,
        record.last_sync_date_for_data,
    )


def test_round_trip_keeps_every_serialized_field():
    original = _full_record()
    restored = deserialize_record(serialize_record(original))

    assert _fields(restored) == _fields(original)
    assert restored == original


def test_round_trip_drops_etag():
    """The etag is not part of the serialized form"""
    restored = deserialize_record(serialize_record(_full_record()))
    assert restored.etag is None


def test_round_trip_of_fresh_directory():
    record = FileMetadataRecord("/docs/")
    record.mime_type = "DIR"

    restored = deserialize_record(serialize_record(record))

    assert restored.is_directory()
    assert restored.remote_path == "/docs/"
    assert restored.local_path is None
    assert restored.file_id == UNASSIGNED_ID
    assert not restored.is_persisted()


def test_needs_updating_flag_encoding():
    """needs_updating is written 1 for true and read back as true"""
    record = FileMetadataRecord("/a")
    for value in (True, False):
        record.needs_updating = value
        assert deserialize_record(serialize_record(record)).needs_updating is value


def test_field_layout():
    record = FileMetadataRecord("/a")
    record.file_id = 1
    record.parent_id = 2
    record.needs_updating = True

    data = serialize_record(record)

    longs = struct.unpack(">6q", data[:48])
    assert longs == (1, 2, 0, 0, 0, 0)
    # remote_path, then absent local_path and mime_type
    assert data[48:52] == struct.pack(">i", 2)
    assert data[52:54] == b"/a"
    assert data[54:58] == struct.pack(">i", -1)
    assert data[58:62] == struct.pack(">i", -1)
    # needs_updating, keep_in_sync
    assert data[62:64] == b"\x01\x00"
    assert len(data) == 64 + 16


def test_non_ascii_paths():
    record = FileMetadataRecord("/Müller/日本語.txt")
    record.local_path = "/cache/Müller/日本語.txt"
    restored = deserialize_record(serialize_record(record))
    assert restored.remote_path == record.remote_path
    assert restored.local_path == record.local_path
    assert restored.file_name == "日本語.txt"


def test_deserialize_does_not_validate_path():
    """A corrupt producer can yield an inconsistent record"""
    record = FileMetadataRecord("/a")
    data = serialize_record(record)
    corrupt = data[:48] + struct.pack(">i", 1) + b"a" + data[54:]

    restored = deserialize_record(corrupt)
    assert restored.remote_path == "a"


def test_truncated_data_raises():
    data = serialize_record(_full_record())
    for cut in (0, 7, 48, 60, len(data) - 1):
        with pytest.raises(RecordSerializationError):
            deserialize_record(data[:cut])


def test_trailing_bytes_raise():
    data = serialize_record(_full_record())
    with pytest.raises(RecordSerializationError):
        deserialize_record(data + b"\x00")


def test_invalid_flag_raises():
    record = FileMetadataRecord("/a")
    data = bytearray(serialize_record(record))
    data[62] = 7
    with pytest.raises(RecordSerializationError):
        deserialize_record(bytes(data))


def test_out_of_range_value_raises():
    record = FileMetadataRecord("/a")
    record.length = 2 ** 63
    with pytest.raises(RecordSerializationError):
        serialize_record(record)


def test_stream_holds_consecutive_records():
    stream = io.BytesIO()
    write_record(stream, _full_record())
    write_record(stream, FileMetadataRecord("/second"))

    stream.seek(0)
    assert read_record(stream).remote_path == "/photos/2024/beach.jpg"
    assert read_record(stream).remote_path == "/second"
    assert stream.read() == b""


def test_snapshot():
    directory = FileMetadataRecord("/photos/")
    directory.mime_type = "DIR"
    directory.file_id = 4
    records = [directory, _full_record()]

    stream = io.BytesIO()
    assert write_snapshot(stream, records) == 2

    stream.seek(0)
    restored = read_snapshot(stream)
    assert [_fields(r) for r in restored] == [_fields(r) for r in records]


def test_empty_snapshot():
    stream = io.BytesIO()
    write_snapshot(stream, [])
    stream.seek(0)
    assert read_snapshot(stream) == []


def test_snapshot_with_bad_header_raises():
    with pytest.raises(RecordSerializationError):
        read_snapshot(io.BytesIO(b"XXXX\x01\x00\x00\x00\x00"))
    with pytest.raises(RecordSerializationError):
        read_snapshot(io.BytesIO(SNAPSHOT_MAGIC + b"\x09\x00\x00\x00\x00"))


def test_snapshot_with_missing_records_raises():
    stream = io.BytesIO(SNAPSHOT_MAGIC + b"\x01" + struct.pack(">I", 3))
    with pytest.raises(RecordSerializationError):
        read_snapshot(stream)
