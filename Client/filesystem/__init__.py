"""
NimbusSync Client - Filesystem Package

Contains the local filesystem lookups used by the metadata records.

Author: NimbusSync Project
"""

from .local_storage import LocalStorage, DEFAULT_LOCAL_STORAGE

__all__ = [
    'LocalStorage',
    'DEFAULT_LOCAL_STORAGE'
]
