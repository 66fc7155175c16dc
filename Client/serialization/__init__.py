"""
NimbusSync Client - Serialization Package

Contains the binary form used to pass metadata records across process
boundaries and to store record snapshots.

Author: NimbusSync Project
"""

from .record_serializer import (
    write_record,
    read_record,
    serialize_record,
    deserialize_record,
    write_snapshot,
    read_snapshot,
    SNAPSHOT_MAGIC,
    SNAPSHOT_VERSION
)

__all__ = [
    'write_record',
    'read_record',
    'serialize_record',
    'deserialize_record',
    'write_snapshot',
    'read_snapshot',
    'SNAPSHOT_MAGIC',
    'SNAPSHOT_VERSION'
]
