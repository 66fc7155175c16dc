"""
NimbusSync Client - File Entry Database Model

Row model for the locally stored metadata of remote files and directories.
"""

from sqlalchemy import Column, Integer, BigInteger, String, Boolean, Index

from models.database.base import Base


class FileEntry(Base):
    """
    Filelist table - one row per known remote entry
    """
    __tablename__ = "filelist"

    file_id = Column(Integer, primary_key=True, autoincrement=True)
    parent_id = Column(Integer, nullable=False, default=0)
    remote_path = Column(String, nullable=False, unique=True)
    file_name = Column(String, nullable=False)
    local_path = Column(String, nullable=True)  # NULL if not cached
    mime_type = Column(String, nullable=True)  # 'DIR' for directories
    length = Column(BigInteger, default=0)  # bytes
    creation_timestamp = Column(BigInteger, default=0)
    modification_timestamp = Column(BigInteger, default=0)
    modification_timestamp_at_last_sync_for_data = Column(BigInteger, default=0)
    last_sync_date_for_properties = Column(BigInteger, default=0)
    last_sync_date_for_data = Column(BigInteger, default=0)
    keep_in_sync = Column(Boolean, default=False)
    etag = Column(String, nullable=True)

    __table_args__ = (
        # Index for directory listings
        Index('idx_filelist_parent', 'parent_id'),
        {"sqlite_autoincrement": True}
    )
