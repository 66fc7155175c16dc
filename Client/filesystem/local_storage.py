"""
NimbusSync Client - Local Storage Lookups

Thin wrapper over the local filesystem used to check whether a record's
cached content exists and when it was last modified.

Author: NimbusSync Project
"""

import logging
from pathlib import Path

# Configure logging
logger = logging.getLogger(__name__)


class LocalStorage:
    """
    File presence and timestamp lookups for cached content.

    Every call performs a fresh stat on the filesystem; nothing is cached.
    Tests substitute an object with the same two methods.
    """

    def exists(self, path: str) -> bool:
        """
        Check whether a local path currently exists.

        Args:
            path: Local filesystem path

        Returns:
            True if the path exists, False otherwise (including stat failures)
        """
        try:
            return Path(path).exists()
        except OSError as e:
            logger.debug(f"Could not stat {path}: {e}")
            return False

    def last_modified_time(self, path: str) -> int:
        """
        Get the last modification time of a local path.

        Args:
            path: Local filesystem path

        Returns:
            Unix timestamp in milliseconds, or 0 if the path cannot be read
        """
        try:
            return int(Path(path).stat().st_mtime * 1000)
        except OSError as e:
            logger.debug(f"Could not read modification time of {path}: {e}")
            return 0


# Shared instance used when no storage is passed explicitly
DEFAULT_LOCAL_STORAGE = LocalStorage()
