"""
NimbusSync Client - Exceptions Package

Contains all exception classes for the NimbusSync client.

Author: NimbusSync Project
"""

from .nimbussync_error import NimbusSyncError
from .invalid_argument_error import InvalidArgumentError
from .invalid_state_error import InvalidStateError
from .record_serialization_error import RecordSerializationError
from .metadata_store_error import MetadataStoreError

__all__ = [
    'NimbusSyncError',
    'InvalidArgumentError',
    'InvalidStateError',
    'RecordSerializationError',
    'MetadataStoreError'
]
