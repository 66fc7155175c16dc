"""
NimbusSync Client - Models Package

Contains data models and enumerations used by the client.

Author: NimbusSync Project
"""

from .file_metadata_record import (
    FileMetadataRecord,
    EntryKind,
    sort_for_listing,
    PATH_SEPARATOR,
    ROOT_PATH,
    DIRECTORY_MIME_TYPE,
    UNASSIGNED_ID,
    ROOT_PARENT_ID
)
from .remote_entry import RemoteEntry, fill_record

__all__ = [
    'FileMetadataRecord',
    'EntryKind',
    'sort_for_listing',
    'PATH_SEPARATOR',
    'ROOT_PATH',
    'DIRECTORY_MIME_TYPE',
    'UNASSIGNED_ID',
    'ROOT_PARENT_ID',
    'RemoteEntry',
    'fill_record'
]
