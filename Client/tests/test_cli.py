"""
Tests for the CLI operations

Tests listing, snapshot export and import against temporary stores.
"""

import sys
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import cli
from exceptions import RecordSerializationError
from managers import ConfigManager, MetadataStore
from models import FileMetadataRecord
from serialization import write_snapshot


def _open_store(path):
    store = MetadataStore(str(path))
    store.initialize_database()
    return store


def _populate(store):
    docs = FileMetadataRecord("/docs/")
    docs.mime_type = "DIR"
    store.save_record(docs)

    for path in ["/docs/b.txt", "/docs/A.txt"]:
        record = FileMetadataRecord(path)
        record.length = 10
        store.save_record(record)

    sub = FileMetadataRecord("/docs/sub/")
    sub.mime_type = "DIR"
    store.save_record(sub)


def test_list_directory_prints_listing_order(tmp_path, capsys):
    store = _open_store(tmp_path / "a.db")
    _populate(store)

    assert cli.list_directory(store, "/docs/") == cli.EXIT_SUCCESS

    lines = capsys.readouterr().out.splitlines()
    assert [line.split()[2] for line in lines] == ["sub", "A.txt", "b.txt"]
    assert lines[0].startswith("d")
    store.close()


def test_list_missing_directory(tmp_path):
    store = _open_store(tmp_path / "a.db")
    assert cli.list_directory(store, "/nope/") == cli.EXIT_FAILURE
    store.close()


def test_show_record(tmp_path, capsys):
    store = _open_store(tmp_path / "a.db")
    _populate(store)

    assert cli.show_record(store, "/docs/A.txt") == cli.EXIT_SUCCESS
    assert "name=A.txt" in capsys.readouterr().out
    store.close()


def test_export_then_import_into_new_store(tmp_path):
    source = _open_store(tmp_path / "source.db")
    _populate(source)
    snapshot = tmp_path / "records.snap"

    assert cli.export_snapshot(source, str(snapshot)) == cli.EXIT_SUCCESS

    target = _open_store(tmp_path / "target.db")
    assert cli.import_snapshot(target, str(snapshot)) == cli.EXIT_SUCCESS

    source_paths = sorted(r.remote_path for r in source.get_all_records())
    target_paths = sorted(r.remote_path for r in target.get_all_records())
    assert source_paths == target_paths

    docs = target.get_record_by_path("/docs/")
    children = target.get_children(docs.file_id)
    assert [c.file_name for c in children] == ["sub", "A.txt", "b.txt"]
    assert all(c.length == 10 for c in children if not c.is_directory())

    source.close()
    target.close()


def test_run_cli_operation(tmp_path, capsys):
    config_manager = ConfigManager(base_dir=tmp_path)

    exit_code = cli.run_cli_operation("list", "/", config_manager=config_manager)

    assert exit_code == cli.EXIT_SUCCESS
    assert (tmp_path / "nimbussync.db").exists()
    assert (tmp_path / "logs").is_dir()


def test_run_cli_operation_list_on_file(tmp_path):
    config_manager = ConfigManager(base_dir=tmp_path)
    config_manager.load_config()
    store = _open_store(config_manager.get_database_path())
    _populate(store)
    store.close()

    exit_code = cli.run_cli_operation("list", "/docs/A.txt", config_manager=config_manager)

    assert exit_code == cli.EXIT_INVALID_STATE


def test_import_snapshot_without_remote_path(tmp_path):
    snapshot = tmp_path / "broken.snap"
    with open(snapshot, 'wb') as f:
        write_snapshot(f, [FileMetadataRecord("/a.txt"), FileMetadataRecord.from_trusted_path(None)])

    store = _open_store(tmp_path / "a.db")
    with pytest.raises(RecordSerializationError):
        cli.import_snapshot(store, str(snapshot))
    assert not store.record_exists("/a.txt")
    store.close()
