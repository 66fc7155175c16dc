"""
Tests for remote entry metadata

Tests validation of listing data and filling records from it.
"""

import sys
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from exceptions import InvalidArgumentError
from models import FileMetadataRecord, RemoteEntry, fill_record


def test_from_listing_validates_path():
    entry = RemoteEntry.from_listing({"remote_path": "/a/b.txt", "length": 10})
    assert entry.remote_path == "/a/b.txt"
    assert entry.length == 10

    with pytest.raises(InvalidArgumentError):
        RemoteEntry.from_listing({"remote_path": "a/b.txt"})


def test_from_listing_rejects_negative_length():
    with pytest.raises(InvalidArgumentError):
        RemoteEntry.from_listing({"remote_path": "/a", "length": -1})


def test_from_listing_requires_path():
    with pytest.raises(InvalidArgumentError):
        RemoteEntry.from_listing({"length": 1})


def test_to_record():
    entry = RemoteEntry(
        remote_path="/music/song.mp3",
        mime_type="audio/mpeg",
        length=4096,
        creation_timestamp=100,
        modification_timestamp=200,
        etag="abc123"
    )

    record = entry.to_record()

    assert record.remote_path == "/music/song.mp3"
    assert record.mime_type == "audio/mpeg"
    assert record.length == 4096
    assert record.creation_timestamp == 100
    assert record.modification_timestamp == 200
    assert record.etag == "abc123"
    assert not record.is_persisted()
    assert not record.is_directory()


def test_to_record_directory():
    record = RemoteEntry(remote_path="/music/", mime_type="DIR").to_record()
    assert record.is_directory()
    assert record.file_name == "music"


def test_fill_record_only_touches_properties():
    """A properties sync leaves the data sync state alone"""
    record = FileMetadataRecord("/a.txt")
    record.file_id = 3
    record.local_path = "/cache/a.txt"
    record.modification_timestamp_at_last_sync_for_data = 50
    record.last_sync_date_for_data = 60
    record.keep_in_sync = True

    fill_record(record, RemoteEntry(
        remote_path="/a.txt",
        mime_type="text/plain",
        length=12,
        modification_timestamp=90,
        etag="e2"
    ))

    assert record.length == 12
    assert record.mime_type == "text/plain"
    assert record.modification_timestamp == 90
    assert record.etag == "e2"
    assert record.file_id == 3
    assert record.local_path == "/cache/a.txt"
    assert record.modification_timestamp_at_last_sync_for_data == 50
    assert record.last_sync_date_for_data == 60
    assert record.keep_in_sync


def test_directory_path_gets_trailing_separator():
    entry = RemoteEntry.from_listing({"remote_path": "/docs", "mime_type": "DIR"})
    assert entry.remote_path == "/docs/"
    assert entry.to_record().remote_path == "/docs/"

    # Files are left alone
    assert RemoteEntry(remote_path="/docs", mime_type="text/plain").remote_path == "/docs"
    assert RemoteEntry(remote_path="/", mime_type="DIR").remote_path == "/"
