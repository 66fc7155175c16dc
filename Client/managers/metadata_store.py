"""
NimbusSync Client - Metadata Store

Local SQLite persistence for FileMetadataRecord. Assigns identifiers,
resolves parent directories and serves records by identifier, remote path
or parent identifier.

Author: NimbusSync Project
"""

import logging
from pathlib import Path
from typing import List, Optional

from sqlalchemy import create_engine, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from exceptions import MetadataStoreError
from models import (
    FileMetadataRecord,
    sort_for_listing,
    DIRECTORY_MIME_TYPE,
    PATH_SEPARATOR,
    ROOT_PATH,
    ROOT_PARENT_ID,
    UNASSIGNED_ID
)
from models.database import Base, FileEntry

# Configure logging
logger = logging.getLogger(__name__)


def _descendant_prefix(remote_path: str) -> str:
    """Prefix shared by every path below a directory, ending with exactly one "/"."""
    return remote_path.rstrip(PATH_SEPARATOR) + PATH_SEPARATOR


class MetadataStore:
    """
    Manages the local metadata database.

    Every call opens its own session and hands back fresh record objects,
    so callers never share a record instance with the store. Concurrent
    writers are not coordinated.
    """

    def __init__(self, db_path: str = "nimbussync.db"):
        """
        Initialize metadata store

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = db_path

        # Ensure database directory exists
        db_dir = Path(db_path).parent
        if db_dir and str(db_dir) != '.':
            db_dir.mkdir(parents=True, exist_ok=True)

        self.engine = create_engine(f"sqlite:///{db_path}", echo=False)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine, expire_on_commit=False)

    def initialize_database(self) -> FileMetadataRecord:
        """
        Create the tables and the root directory record if missing.

        Returns:
            The stored root directory record
        """
        try:
            Base.metadata.create_all(bind=self.engine)
        except SQLAlchemyError as e:
            raise MetadataStoreError(f"Could not create tables in {self.db_path}: {e}") from e

        root = self.get_record_by_path(ROOT_PATH)
        if root is None:
            root = FileMetadataRecord(ROOT_PATH)
            root.mime_type = DIRECTORY_MIME_TYPE
            self.save_record(root)
            logger.info(f"Created root directory record in {self.db_path}")
        return root

    def close(self):
        """Release the database engine."""
        self.engine.dispose()

    @staticmethod
    def _row_to_record(row: FileEntry) -> FileMetadataRecord:
        record = FileMetadataRecord(row.remote_path)
        record.file_id = row.file_id
        record.parent_id = row.parent_id
        record.local_path = row.local_path
        record.mime_type = row.mime_type
        record.length = row.length or 0
        record.creation_timestamp = row.creation_timestamp or 0
        record.modification_timestamp = row.modification_timestamp or 0
        record.modification_timestamp_at_last_sync_for_data = row.modification_timestamp_at_last_sync_for_data or 0
        record.last_sync_date_for_properties = row.last_sync_date_for_properties or 0
        record.last_sync_date_for_data = row.last_sync_date_for_data or 0
        record.keep_in_sync = bool(row.keep_in_sync)
        record.etag = row.etag
        return record

    @staticmethod
    def _apply_record_to_row(record: FileMetadataRecord, row: FileEntry):
        row.parent_id = record.parent_id
        row.remote_path = record.remote_path
        row.file_name = record.file_name
        row.local_path = record.local_path
        row.mime_type = record.mime_type
        row.length = record.length
        row.creation_timestamp = record.creation_timestamp
        row.modification_timestamp = record.modification_timestamp
        row.modification_timestamp_at_last_sync_for_data = record.modification_timestamp_at_last_sync_for_data
        row.last_sync_date_for_properties = record.last_sync_date_for_properties
        row.last_sync_date_for_data = record.last_sync_date_for_data
        row.keep_in_sync = record.keep_in_sync
        row.etag = record.etag

    def save_record(self, record: FileMetadataRecord) -> FileMetadataRecord:
        """
        Insert or update a record.

        Unpersisted records are matched by remote path first, so saving a
        freshly listed entry updates the existing row. When the parent id
        is unset, it is resolved from the parent directory's remote path.
        When a stored directory changes its remote path, every row below it
        is moved to the new path in the same transaction. On success the
        record's file_id is assigned and needs_updating is cleared.

        Args:
            record: Record to store; updated in place

        Returns:
            The same record

        Raises:
            MetadataStoreError: If the record can't be stored
        """
        if not record.remote_path:
            raise MetadataStoreError("Cannot store a record without a remote path")
        if record.is_directory() and not record.remote_path.endswith(PATH_SEPARATOR):
            raise MetadataStoreError(
                f"Directory path must end with '{PATH_SEPARATOR}': {record.remote_path}"
            )

        session = self.SessionLocal()
        try:
            if record.is_persisted():
                row = session.get(FileEntry, record.file_id)
                if row is None:
                    raise MetadataStoreError(f"No stored record with id {record.file_id}")
                if record.is_directory() and row.remote_path != record.remote_path:
                    self._move_descendants(session, row, record.remote_path)
            else:
                row = session.query(FileEntry).filter(FileEntry.remote_path == record.remote_path).first()

            if record.parent_id == ROOT_PARENT_ID and not record.is_root():
                parent_row = session.query(FileEntry).filter(FileEntry.remote_path == record.parent_path).first()
                if parent_row is None:
                    raise MetadataStoreError(
                        f"Parent directory {record.parent_path} of {record.remote_path} is not stored"
                    )
                record.parent_id = parent_row.file_id

            if row is None:
                row = FileEntry()
                session.add(row)
                logger.debug(f"Inserting record for {record.remote_path}")
            else:
                logger.debug(f"Updating record {row.file_id} for {record.remote_path}")

            self._apply_record_to_row(record, row)
            session.commit()

            record.file_id = row.file_id
            record.needs_updating = False
            return record

        except SQLAlchemyError as e:
            session.rollback()
            raise MetadataStoreError(f"Could not save {record.remote_path}: {e}") from e
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    @staticmethod
    def _move_descendants(session, row: FileEntry, new_path: str):
        """Rewrite the remote paths of every row below a renamed directory."""
        old_prefix = _descendant_prefix(row.remote_path)
        new_prefix = _descendant_prefix(new_path)
        descendants = (
            session.query(FileEntry)
            .filter(FileEntry.remote_path.startswith(old_prefix, autoescape=True))
            .filter(FileEntry.file_id != row.file_id)
            .all()
        )
        for descendant in descendants:
            descendant.remote_path = new_prefix + descendant.remote_path[len(old_prefix):]
        logger.debug(f"Moved {len(descendants)} record(s) from {old_prefix} to {new_prefix}")

    def get_record_by_id(self, file_id: int) -> Optional[FileMetadataRecord]:
        """
        Get a record by identifier.

        Returns:
            FileMetadataRecord, or None if not stored
        """
        session = self.SessionLocal()
        try:
            row = session.get(FileEntry, file_id)
            return self._row_to_record(row) if row else None
        finally:
            session.close()

    def get_record_by_path(self, remote_path: str) -> Optional[FileMetadataRecord]:
        """
        Get a record by remote path.

        Returns:
            FileMetadataRecord, or None if not stored
        """
        session = self.SessionLocal()
        try:
            row = session.query(FileEntry).filter(FileEntry.remote_path == remote_path).first()
            return self._row_to_record(row) if row else None
        finally:
            session.close()

    def record_exists(self, remote_path: str) -> bool:
        """Check whether a record is stored for the remote path."""
        session = self.SessionLocal()
        try:
            return session.query(FileEntry.file_id).filter(FileEntry.remote_path == remote_path).first() is not None
        finally:
            session.close()

    def get_children(self, parent_id: int) -> List[FileMetadataRecord]:
        """
        Get the records contained in a directory.

        Args:
            parent_id: Identifier of the directory record

        Returns:
            Records in listing order (directories first, then case-insensitive path)
        """
        session = self.SessionLocal()
        try:
            rows = (
                session.query(FileEntry)
                .filter(FileEntry.parent_id == parent_id)
                .filter(FileEntry.file_id != parent_id)
                .all()
            )
            logger.debug(f"Found {len(rows)} children of record {parent_id}")
            return sort_for_listing(self._row_to_record(row) for row in rows)
        finally:
            session.close()

    def get_all_records(self) -> List[FileMetadataRecord]:
        """Get every stored record, ordered by identifier."""
        session = self.SessionLocal()
        try:
            rows = session.query(FileEntry).order_by(FileEntry.file_id).all()
            return [self._row_to_record(row) for row in rows]
        finally:
            session.close()

    def remove_record(self, record: FileMetadataRecord) -> int:
        """
        Remove a record and, for directories, everything below it.

        Args:
            record: Record to remove; its file_id is reset on success

        Returns:
            Number of rows removed
        """
        session = self.SessionLocal()
        try:
            query = session.query(FileEntry)
            if record.is_directory():
                query = query.filter(or_(
                    FileEntry.remote_path == record.remote_path,
                    FileEntry.remote_path.startswith(_descendant_prefix(record.remote_path), autoescape=True)
                ))
            elif record.is_persisted():
                query = query.filter(FileEntry.file_id == record.file_id)
            else:
                query = query.filter(FileEntry.remote_path == record.remote_path)

            removed = query.delete(synchronize_session=False)
            session.commit()

            logger.info(f"Removed {removed} record(s) for {record.remote_path}")
            record.file_id = UNASSIGNED_ID
            return removed

        except SQLAlchemyError as e:
            session.rollback()
            raise MetadataStoreError(f"Could not remove {record.remote_path}: {e}") from e
        finally:
            session.close()
