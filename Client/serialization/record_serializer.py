"""
NimbusSync Client - Record Serializer

Reads and writes FileMetadataRecord in a fixed field order:

    file_id, parent_id, length, creation_timestamp, modification_timestamp,
    modification_timestamp_at_last_sync_for_data (int64 each),
    remote_path, local_path, mime_type (int32 byte length + UTF-8, -1 = absent),
    needs_updating, keep_in_sync (1 byte each, 1 = true),
    last_sync_date_for_properties, last_sync_date_for_data (int64 each)

All integers are big-endian. The etag is not part of this form.

Snapshots wrap any number of records behind a small header:
magic (4 bytes), version (uint8), record count (uint32).

Author: NimbusSync Project
"""

import io
import logging
import struct
from typing import BinaryIO, Iterable, List, Optional

from exceptions import RecordSerializationError
from models import FileMetadataRecord

# Configure logging
logger = logging.getLogger(__name__)


SNAPSHOT_MAGIC = b"NSRS"
SNAPSHOT_VERSION = 1

_INT64 = struct.Struct(">q")
_INT32 = struct.Struct(">i")
_UINT32 = struct.Struct(">I")
_FLAG = struct.Struct(">B")
_ABSENT = -1


def _read_exact(stream: BinaryIO, size: int) -> bytes:
    data = stream.read(size)
    if len(data) < size:
        raise RecordSerializationError(
            f"Unexpected end of data: wanted {size} bytes, got {len(data)}"
        )
    return data


def _write_long(stream: BinaryIO, value: int):
    try:
        stream.write(_INT64.pack(value))
    except struct.error as e:
        raise RecordSerializationError(f"Value out of int64 range: {value}") from e


def _read_long(stream: BinaryIO) -> int:
    return _INT64.unpack(_read_exact(stream, _INT64.size))[0]


def _write_string(stream: BinaryIO, value: Optional[str]):
    if value is None:
        stream.write(_INT32.pack(_ABSENT))
        return
    encoded = value.encode("utf-8")
    stream.write(_INT32.pack(len(encoded)))
    stream.write(encoded)


def _read_string(stream: BinaryIO) -> Optional[str]:
    size = _INT32.unpack(_read_exact(stream, _INT32.size))[0]
    if size == _ABSENT:
        return None
    if size < 0:
        raise RecordSerializationError(f"Invalid string length: {size}")
    try:
        return _read_exact(stream, size).decode("utf-8")
    except UnicodeDecodeError as e:
        raise RecordSerializationError(f"Invalid UTF-8 string: {e}") from e


def _write_flag(stream: BinaryIO, value: bool):
    stream.write(_FLAG.pack(1 if value else 0))


def _read_flag(stream: BinaryIO) -> bool:
    value = _FLAG.unpack(_read_exact(stream, _FLAG.size))[0]
    if value not in (0, 1):
        raise RecordSerializationError(f"Invalid flag byte: {value}")
    return value == 1


def write_record(stream: BinaryIO, record: FileMetadataRecord):
    """
    Write one record to a binary stream.

    Args:
        stream: Writable binary stream
        record: Record to write

    Raises:
        RecordSerializationError: If a numeric field does not fit in int64
    """
    _write_long(stream, record.file_id)
    _write_long(stream, record.parent_id)
    _write_long(stream, record.length)
    _write_long(stream, record.creation_timestamp)
    _write_long(stream, record.modification_timestamp)
    _write_long(stream, record.modification_timestamp_at_last_sync_for_data)
    _write_string(stream, record.remote_path)
    _write_string(stream, record.local_path)
    _write_string(stream, record.mime_type)
    _write_flag(stream, record.needs_updating)
    _write_flag(stream, record.keep_in_sync)
    _write_long(stream, record.last_sync_date_for_properties)
    _write_long(stream, record.last_sync_date_for_data)


def read_record(stream: BinaryIO) -> FileMetadataRecord:
    """
    Read one record from a binary stream.

    The remote path is not validated again; the data is trusted to come
    from write_record().

    Args:
        stream: Readable binary stream positioned at a record

    Returns:
        Reconstructed record (etag is always None)

    Raises:
        RecordSerializationError: If the data is truncated or corrupt
    """
    file_id = _read_long(stream)
    parent_id = _read_long(stream)
    length = _read_long(stream)
    creation_timestamp = _read_long(stream)
    modification_timestamp = _read_long(stream)
    modification_timestamp_at_last_sync_for_data = _read_long(stream)
    remote_path = _read_string(stream)
    local_path = _read_string(stream)
    mime_type = _read_string(stream)
    needs_updating = _read_flag(stream)
    keep_in_sync = _read_flag(stream)
    last_sync_date_for_properties = _read_long(stream)
    last_sync_date_for_data = _read_long(stream)

    record = FileMetadataRecord.from_trusted_path(remote_path)
    record.file_id = file_id
    record.parent_id = parent_id
    record.length = length
    record.creation_timestamp = creation_timestamp
    record.modification_timestamp = modification_timestamp
    record.modification_timestamp_at_last_sync_for_data = modification_timestamp_at_last_sync_for_data
    record.local_path = local_path
    record.mime_type = mime_type
    record.needs_updating = needs_updating
    record.keep_in_sync = keep_in_sync
    record.last_sync_date_for_properties = last_sync_date_for_properties
    record.last_sync_date_for_data = last_sync_date_for_data
    return record


def serialize_record(record: FileMetadataRecord) -> bytes:
    """Serialize one record to bytes."""
    buffer = io.BytesIO()
    write_record(buffer, record)
    return buffer.getvalue()


def deserialize_record(data: bytes) -> FileMetadataRecord:
    """
    Deserialize one record from bytes produced by serialize_record().

    Raises:
        RecordSerializationError: If the data is truncated, corrupt or has trailing bytes
    """
    buffer = io.BytesIO(data)
    record = read_record(buffer)
    trailing = len(data) - buffer.tell()
    if trailing:
        raise RecordSerializationError(f"{trailing} trailing bytes after record")
    return record


def write_snapshot(stream: BinaryIO, records: Iterable[FileMetadataRecord]) -> int:
    """
    Write a snapshot of records to a binary stream.

    Args:
        stream: Writable binary stream
        records: Records to include

    Returns:
        Number of records written
    """
    records = list(records)
    stream.write(SNAPSHOT_MAGIC)
    stream.write(_FLAG.pack(SNAPSHOT_VERSION))
    stream.write(_UINT32.pack(len(records)))
    for record in records:
        write_record(stream, record)
    logger.debug(f"Wrote snapshot with {len(records)} records")
    return len(records)


def read_snapshot(stream: BinaryIO) -> List[FileMetadataRecord]:
    """
    Read a snapshot written by write_snapshot().

    Args:
        stream: Readable binary stream

    Returns:
        List of records in snapshot order

    Raises:
        RecordSerializationError: If the header is wrong or the data is truncated
    """
    magic = _read_exact(stream, len(SNAPSHOT_MAGIC))
    if magic != SNAPSHOT_MAGIC:
        raise RecordSerializationError(f"Not a record snapshot (magic {magic!r})")

    version = _FLAG.unpack(_read_exact(stream, _FLAG.size))[0]
    if version != SNAPSHOT_VERSION:
        raise RecordSerializationError(f"Unsupported snapshot version: {version}")

    count = _UINT32.unpack(_read_exact(stream, _UINT32.size))[0]
    records = [read_record(stream) for _ in range(count)]
    logger.debug(f"Read snapshot with {len(records)} records")
    return records
