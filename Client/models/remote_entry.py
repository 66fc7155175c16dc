"""
NimbusSync Client - Remote Entry Model

Pydantic model for raw metadata reported by a remote listing, and the
helpers that turn it into (or refresh) a FileMetadataRecord.

Author: NimbusSync Project
"""

import logging
from typing import Optional

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from exceptions import InvalidArgumentError
from models.file_metadata_record import FileMetadataRecord, DIRECTORY_MIME_TYPE, PATH_SEPARATOR

# Configure logging
logger = logging.getLogger(__name__)


class RemoteEntry(BaseModel):
    """Metadata of one entry as reported by the server"""
    remote_path: str
    mime_type: Optional[str] = None
    length: int = Field(default=0, ge=0)
    creation_timestamp: int = 0
    modification_timestamp: int = 0
    etag: Optional[str] = None

    @field_validator("remote_path")
    @classmethod
    def validate_remote_path(cls, value: str) -> str:
        if not value.startswith(PATH_SEPARATOR):
            raise ValueError(f"remote path must start with '{PATH_SEPARATOR}': {value!r}")
        return value

    @model_validator(mode="after")
    def normalize_directory_path(self) -> "RemoteEntry":
        # Directory paths always end with the separator
        if self.mime_type == DIRECTORY_MIME_TYPE and not self.remote_path.endswith(PATH_SEPARATOR):
            self.remote_path += PATH_SEPARATOR
        return self

    @classmethod
    def from_listing(cls, data: dict) -> "RemoteEntry":
        """
        Build an entry from a raw listing dictionary.

        Args:
            data: Raw metadata as produced by the network layer

        Returns:
            Validated RemoteEntry

        Raises:
            InvalidArgumentError: If the metadata does not validate
        """
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise InvalidArgumentError(f"Invalid remote entry: {e}") from e

    def to_record(self) -> FileMetadataRecord:
        """
        Create a new, unpersisted record from this entry.

        Returns:
            FileMetadataRecord carrying this entry's properties
        """
        record = FileMetadataRecord(self.remote_path)
        fill_record(record, self)
        return record


def fill_record(record: FileMetadataRecord, entry: RemoteEntry):
    """
    Copy the properties reported by the server onto an existing record.

    This is the update applied by a properties sync. Local path and the
    data-sync timestamps are left untouched.

    Args:
        record: Record to update in place
        entry: Metadata reported by the server
    """
    if record.remote_path != entry.remote_path:
        logger.warning(
            f"Filling {record.remote_path} with metadata reported for {entry.remote_path}"
        )
    record.creation_timestamp = entry.creation_timestamp
    record.length = entry.length
    record.mime_type = entry.mime_type
    record.modification_timestamp = entry.modification_timestamp
    record.etag = entry.etag
