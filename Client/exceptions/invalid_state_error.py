"""
NimbusSync Client - Invalid State Error Exception

Exception raised when a structural operation is invoked on a record
that cannot take part in it (e.g. attaching a child to a file).

Author: NimbusSync Project
"""

from .nimbussync_error import NimbusSyncError


class InvalidStateError(NimbusSyncError, RuntimeError):
    """Exception for operations on records in the wrong state."""
    pass
