"""
NimbusSync Client - Database Models Package

This package contains the SQLAlchemy model definitions of the local
metadata store.
"""

from models.database.base import Base
from models.database.file_entry import FileEntry

__all__ = [
    'Base',
    'FileEntry',
]
