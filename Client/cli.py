"""
NimbusSync Client - CLI Mode Module

Implements command-line operations for inspecting the local metadata store
and exporting/importing record snapshots. Logs to a timestamped file.

Author: NimbusSync Project
"""

import sys
import logging
from pathlib import Path
from datetime import datetime
from typing import Optional

from managers import ConfigManager, MetadataStore
from models import ROOT_PATH, ROOT_PARENT_ID, UNASSIGNED_ID
from exceptions import NimbusSyncError, InvalidArgumentError, InvalidStateError, RecordSerializationError
from serialization import write_snapshot, read_snapshot


# Exit codes
EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_CONFIG_ERROR = 2
EXIT_INVALID_STATE = 4


def setup_cli_logging(config_manager: ConfigManager) -> Path:
    """
    Setup logging for CLI mode with timestamped log file.

    Creates log file with format: nimbussync-YYYY-MM-DD-HH-MM-SS.log
    in a "logs" subdirectory of the configuration folder.

    Args:
        config_manager: ConfigManager instance for log settings

    Returns:
        Path to the created log file
    """
    log_level = config_manager.get("log_level", "INFO")

    timestamp = datetime.now().strftime("%Y-%m-%d-%H-%M-%S")
    log_filename = f"nimbussync-{timestamp}.log"

    log_dir = config_manager.base_dir / "logs"
    log_dir.mkdir(exist_ok=True)

    log_file = log_dir / log_filename

    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(log_file),
            logging.StreamHandler(sys.stdout)  # Also output to console
        ]
    )

    logger = logging.getLogger(__name__)
    logger.info(f"NimbusSync CLI Mode - Log file: {log_file}")
    logger.info(f"Log level: {log_level}")

    return log_file


def cleanup_old_logs(config_manager: ConfigManager, current_log: Path):
    """
    Delete log files older than retention period.

    Args:
        config_manager: ConfigManager instance for retention settings
        current_log: Path to current log file (don't delete this)
    """
    logger = logging.getLogger(__name__)
    retention_days = config_manager.get("log_retention_days", 30)

    if retention_days <= 0:
        return  # Retention disabled

    log_dir = current_log.parent
    cutoff_time = datetime.now().timestamp() - (retention_days * 86400)

    deleted_count = 0
    for log_file in log_dir.glob("nimbussync-*.log"):
        if log_file == current_log:
            continue

        try:
            if log_file.stat().st_mtime < cutoff_time:
                log_file.unlink()
                deleted_count += 1
        except OSError as e:
            logger.warning(f"Failed to delete old log file {log_file}: {e}")

    if deleted_count > 0:
        logger.info(f"Deleted {deleted_count} old log file(s)")


def list_directory(store: MetadataStore, remote_path: str) -> int:
    """
    Print the contents of a stored directory in listing order.

    Args:
        store: Open metadata store
        remote_path: Remote path of the directory

    Returns:
        Exit code
    """
    directory = store.get_record_by_path(remote_path)
    if directory is None:
        print(f"Not found: {remote_path}")
        return EXIT_FAILURE
    if not directory.is_directory():
        raise InvalidStateError(f"{remote_path} is not a directory")

    for child in store.get_children(directory.file_id):
        marker = "d" if child.is_directory() else "-"
        cached = "cached" if child.is_cached_locally() else ""
        print(f"{marker} {child.length:>12} {child.file_name:<40} {cached}")
    return EXIT_SUCCESS


def show_record(store: MetadataStore, remote_path: str) -> int:
    """Print a single stored record."""
    record = store.get_record_by_path(remote_path)
    if record is None:
        print(f"Not found: {remote_path}")
        return EXIT_FAILURE
    print(repr(record))
    return EXIT_SUCCESS


def export_snapshot(store: MetadataStore, snapshot_file: str) -> int:
    """Write every stored record to a snapshot file."""
    logger = logging.getLogger(__name__)
    records = store.get_all_records()
    with open(snapshot_file, 'wb') as f:
        count = write_snapshot(f, records)
    logger.info(f"Exported {count} record(s) to {snapshot_file}")
    return EXIT_SUCCESS


def import_snapshot(store: MetadataStore, snapshot_file: str) -> int:
    """
    Save every record of a snapshot file into the store.

    Identifiers from the snapshot are not reused: records are matched by
    remote path and parents are resolved again, shallowest paths first.
    """
    logger = logging.getLogger(__name__)
    with open(snapshot_file, 'rb') as f:
        records = read_snapshot(f)

    for record in records:
        if not record.remote_path:
            raise RecordSerializationError(f"Snapshot {snapshot_file} holds a record without a remote path")

    imported = 0
    for record in sorted(records, key=lambda r: r.remote_path.rstrip("/").count("/")):
        if record.remote_path == ROOT_PATH:
            continue
        record.file_id = UNASSIGNED_ID
        record.parent_id = ROOT_PARENT_ID
        store.save_record(record)
        imported += 1

    logger.info(f"Imported {imported} record(s) from {snapshot_file}")
    return EXIT_SUCCESS


def run_cli_operation(operation: str, argument: Optional[str] = None,
                      config_manager: Optional[ConfigManager] = None) -> int:
    """
    Execute a CLI operation against the configured metadata store.

    Args:
        operation: "list", "info", "export" or "import"
        argument: Remote path (list, info) or snapshot file (export, import)
        config_manager: Optional pre-built ConfigManager

    Returns:
        Exit code (0 = success, non-zero = failure)
    """
    config_manager = config_manager or ConfigManager()
    try:
        config_manager.load_config()
    except (OSError, ValueError) as e:
        print(f"Failed to load configuration: {e}")
        return EXIT_CONFIG_ERROR

    log_file = setup_cli_logging(config_manager)
    cleanup_old_logs(config_manager, log_file)
    logger = logging.getLogger(__name__)

    store = MetadataStore(str(config_manager.get_database_path()))
    try:
        store.initialize_database()

        if operation == "list":
            return list_directory(store, argument or ROOT_PATH)
        elif operation == "info":
            return show_record(store, argument or ROOT_PATH)
        elif operation == "export":
            return export_snapshot(store, argument)
        elif operation == "import":
            return import_snapshot(store, argument)
        else:
            logger.error(f"Unknown operation: {operation}")
            return EXIT_FAILURE

    except (InvalidArgumentError, InvalidStateError) as e:
        logger.error(f"{operation} failed: {e}")
        return EXIT_INVALID_STATE
    except (NimbusSyncError, OSError) as e:
        logger.error(f"{operation} failed: {e}")
        return EXIT_FAILURE
    finally:
        store.close()
