"""
NimbusSync Client - Base Error Exception

Base exception class for all errors raised by the metadata core.

Author: NimbusSync Project
"""


class NimbusSyncError(Exception):
    """Base exception for NimbusSync errors."""
    pass
