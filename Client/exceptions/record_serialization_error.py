"""
NimbusSync Client - Record Serialization Error Exception

Exception raised when serialized record data is truncated or corrupt.

Author: NimbusSync Project
"""

from .nimbussync_error import NimbusSyncError


class RecordSerializationError(NimbusSyncError):
    """Exception for unreadable serialized records and snapshots."""
    pass
