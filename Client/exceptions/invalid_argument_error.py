"""
NimbusSync Client - Invalid Argument Error Exception

Exception raised when a record is built from an invalid remote path.

Author: NimbusSync Project
"""

from .nimbussync_error import NimbusSyncError


class InvalidArgumentError(NimbusSyncError, ValueError):
    """Exception for invalid remote paths and remote entries."""
    pass
