"""
NimbusSync Client - Metadata Store Error Exception

Exception raised by the local metadata store.

Author: NimbusSync Project
"""

from .nimbussync_error import NimbusSyncError


class MetadataStoreError(NimbusSyncError):
    """Exception for persistence layer failures."""
    pass
