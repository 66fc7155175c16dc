"""
NimbusSync Client - File Metadata Record Model

Contains the FileMetadataRecord entity describing one remote file or
directory as last known to the client, together with its entry kind and
path constants.

Author: NimbusSync Project
"""

import copy
import logging
from enum import Enum
from typing import Optional, Tuple

from exceptions import InvalidArgumentError, InvalidStateError
from filesystem import DEFAULT_LOCAL_STORAGE

# Configure logging
logger = logging.getLogger(__name__)


PATH_SEPARATOR = "/"
ROOT_PATH = PATH_SEPARATOR

# Mime type reported by the server (and stored locally) for directories
DIRECTORY_MIME_TYPE = "DIR"

# Identifier of a record that has not been persisted yet
UNASSIGNED_ID = -1

# Parent identifier of top-level records
ROOT_PARENT_ID = 0


class EntryKind(Enum):
    """
    Enum representing what a remote entry is.

    The kind is derived from the mime type on the way in and turned back
    into the "DIR" mime type on the way out, so stored and serialized
    records keep the server's representation.
    """
    FILE = "file"
    DIRECTORY = "directory"


class FileMetadataRecord:
    """
    Metadata for a single remote file or directory.

    Tracks identity (file_id, parent_id), the remote path, the local cache
    path and two independent sets of sync timestamps:
    - modification_timestamp / last_sync_date_for_properties are refreshed by
      every properties sync
    - modification_timestamp_at_last_sync_for_data / last_sync_date_for_data
      are refreshed only when the contents are transferred

    Records are plain values and are not thread-safe.
    """

    def __init__(self, remote_path: str):
        """
        Create a record for the given remote path.

        Args:
            remote_path: URL-decoded absolute remote path. Must start with "/";
                         directory paths end with "/".

        Raises:
            InvalidArgumentError: If the path is None, empty or not absolute
        """
        if not remote_path or not remote_path.startswith(PATH_SEPARATOR):
            raise InvalidArgumentError(
                f"Trying to create a record with a non valid remote path: {remote_path!r}"
            )
        self._reset_data()
        self._remote_path = remote_path

    @classmethod
    def from_trusted_path(cls, remote_path: Optional[str]) -> "FileMetadataRecord":
        """
        Create a record without validating the remote path.

        Only for data produced by a previous record (serialized form),
        where validation already happened at the producer.

        Args:
            remote_path: Remote path as stored by the producer

        Returns:
            New record with default values for every other field
        """
        record = cls.__new__(cls)
        record._reset_data()
        record._remote_path = remote_path
        return record

    def _reset_data(self):
        """Reset every field to its default value."""
        self.file_id: int = UNASSIGNED_ID
        self.parent_id: int = ROOT_PARENT_ID
        self._remote_path: Optional[str] = None
        self.local_path: Optional[str] = None
        self.kind = EntryKind.FILE
        self._mime_type: Optional[str] = None
        self.length: int = 0
        self.creation_timestamp: int = 0
        self.modification_timestamp: int = 0
        self.modification_timestamp_at_last_sync_for_data: int = 0
        self.last_sync_date_for_properties: int = 0
        self.last_sync_date_for_data: int = 0
        self.needs_updating: bool = False
        self.keep_in_sync: bool = False
        self.etag: Optional[str] = None

    @property
    def remote_path(self) -> Optional[str]:
        """Absolute remote path; changed only through rename()."""
        return self._remote_path

    @property
    def mime_type(self) -> Optional[str]:
        """Mime type as reported by the server, "DIR" for directories."""
        if self.kind == EntryKind.DIRECTORY:
            return DIRECTORY_MIME_TYPE
        return self._mime_type

    @mime_type.setter
    def mime_type(self, value: Optional[str]):
        if value == DIRECTORY_MIME_TYPE:
            self.kind = EntryKind.DIRECTORY
            self._mime_type = None
        else:
            self.kind = EntryKind.FILE
            self._mime_type = value

    def is_directory(self) -> bool:
        """
        Check whether this record is a directory.

        Returns:
            True if the mime type is exactly "DIR"
        """
        return self.kind == EntryKind.DIRECTORY

    def is_persisted(self) -> bool:
        """
        Check whether this record has been stored by the persistence layer.

        Returns:
            True if an identifier has been assigned
        """
        return self.file_id != UNASSIGNED_ID

    def is_root(self) -> bool:
        """Check whether this record is the root directory."""
        return self._remote_path == ROOT_PATH

    def has_local_path(self) -> bool:
        """
        Check whether a local cache path is set, without touching the disk.

        Returns:
            True if local_path is a non-empty string
        """
        return bool(self.local_path)

    def is_cached_locally(self, storage=None) -> bool:
        """
        Check whether the cached content currently exists on disk.

        Performs a filesystem lookup on every call, so the result can change
        without the record being modified.

        Args:
            storage: Object providing exists(path); defaults to the local disk

        Returns:
            True if local_path is set and the path exists
        """
        if not self.has_local_path():
            return False
        storage = storage or DEFAULT_LOCAL_STORAGE
        return storage.exists(self.local_path)

    def local_modification_timestamp(self, storage=None) -> int:
        """
        Get the modification time of the cached content.

        Args:
            storage: Object providing last_modified_time(path); defaults to the local disk

        Returns:
            Unix timestamp in milliseconds, 0 if there is no local path or it can't be read
        """
        if not self.has_local_path():
            return 0
        storage = storage or DEFAULT_LOCAL_STORAGE
        return storage.last_modified_time(self.local_path)

    @property
    def file_name(self) -> str:
        """Last segment of the remote path, or "/" for the root directory."""
        trimmed = self._remote_path.rstrip(PATH_SEPARATOR)
        name = trimmed[trimmed.rfind(PATH_SEPARATOR) + 1:]
        return name if name else PATH_SEPARATOR

    @property
    def parent_path(self) -> str:
        """Remote path of the containing directory, always ending with "/"."""
        trimmed = self._remote_path.rstrip(PATH_SEPARATOR)
        return trimmed[:trimmed.rfind(PATH_SEPARATOR) + 1] or ROOT_PATH

    def rename(self, new_name: Optional[str]):
        """
        Change the last segment of the remote path.

        Does nothing if the new name is None, empty or contains "/", or if
        this is the root directory. The parent directory never changes.

        Args:
            new_name: New file or directory name
        """
        logger.debug(f"Record name changing from {self._remote_path}")
        if not new_name or PATH_SEPARATOR in new_name or self.is_root():
            return

        new_path = self.parent_path + new_name
        if self.is_directory():
            new_path += PATH_SEPARATOR
        self._remote_path = new_path
        logger.debug(f"Record name changed to {self._remote_path}")

    def attach(self, child: "FileMetadataRecord"):
        """
        Add a record to this directory.

        Args:
            child: Record to place in this directory

        Raises:
            InvalidStateError: If this record is not a directory
        """
        if not self.is_directory():
            raise InvalidStateError(
                f"{self._remote_path} is not a directory where you can add stuff to"
            )
        child.parent_id = self.file_id
        self.needs_updating = True

    def copy(self) -> "FileMetadataRecord":
        """
        Return an independent copy of this record.

        Note that an unpersisted copy does not compare equal to its original.
        """
        return copy.copy(self)

    def listing_sort_key(self) -> Tuple[int, str]:
        """Key ordering directories first, then remote paths case-insensitively."""
        return (0 if self.is_directory() else 1, self._remote_path.lower())

    def compare_to(self, other: "FileMetadataRecord") -> int:
        """
        Compare two records for listing presentation.

        Args:
            other: Record to compare with

        Returns:
            -1, 0 or 1
        """
        mine = self.listing_sort_key()
        theirs = other.listing_sort_key()
        return (mine > theirs) - (mine < theirs)

    def __lt__(self, other):
        if not isinstance(other, FileMetadataRecord):
            return NotImplemented
        return self.compare_to(other) < 0

    def __eq__(self, other):
        if not isinstance(other, FileMetadataRecord):
            return NotImplemented
        if not self.is_persisted() or not other.is_persisted():
            return self is other
        return self.file_id == other.file_id

    def __hash__(self):
        # Must not change while the record sits in a set or dict key
        if self.is_persisted():
            return hash(self.file_id)
        return id(self)

    def __repr__(self):
        return (
            f"[id={self.file_id}, name={self.file_name}, mime={self.mime_type}, "
            f"downloaded={self.is_cached_locally()}, local={self.local_path}, "
            f"remote={self._remote_path}, parentId={self.parent_id}, "
            f"keepInSync={self.keep_in_sync}]"
        )


def sort_for_listing(records):
    """
    Sort records the way file lists present them.

    Args:
        records: Iterable of FileMetadataRecord

    Returns:
        New list with directories first, then case-insensitive path order
    """
    return sorted(records, key=FileMetadataRecord.listing_sort_key)
