"""
NimbusSync Client - Configuration Manager

Handles loading and saving client configuration from/to config.json.

Author: NimbusSync Project
"""

import json
import logging
import sys
from pathlib import Path
from typing import Optional, Dict, Any

# Configure logging
logger = logging.getLogger(__name__)


# Default configuration values
DEFAULT_CONFIG = {
    "database_path": "nimbussync.db",  # Relative paths resolve against the config folder
    "log_level": "INFO",
    "log_retention_days": 30
}


class ConfigManager:
    """
    Manages client configuration.

    Responsibilities:
    - Load/save config.json next to the executable (same location as logs folder)
    - Provide configuration values to other modules
    """

    def __init__(self, base_dir: Optional[Path] = None):
        """
        Initialize configuration manager.

        Args:
            base_dir: Folder holding config.json. If None, uses the executable's
                      folder when frozen, otherwise the current directory.
        """
        if base_dir is None:
            if getattr(sys, 'frozen', False):
                # Running as compiled executable
                base_dir = Path(sys.executable).parent
            else:
                # Running as script
                base_dir = Path.cwd()

        self.base_dir = Path(base_dir)
        self.config_file = self.base_dir / "config.json"
        self.config: Dict[str, Any] = {}

    def load_config(self) -> Dict[str, Any]:
        """
        Load configuration from config.json.
        Creates default config if file doesn't exist.

        Returns:
            Configuration dictionary
        """
        if self.config_file.exists():
            logger.debug(f"Loading configuration from {self.config_file}")
            with open(self.config_file, 'r') as f:
                self.config = json.load(f)
            # Merge with defaults for any missing keys
            for key, value in DEFAULT_CONFIG.items():
                if key not in self.config:
                    self.config[key] = value
            logger.info("Configuration loaded successfully")
        else:
            logger.info(f"Configuration file not found, creating default at {self.config_file}")
            self.config = DEFAULT_CONFIG.copy()
            self.save_config()

        return self.config

    def save_config(self):
        """Save current configuration to config.json."""
        logger.debug(f"Saving configuration to {self.config_file}")
        with open(self.config_file, 'w') as f:
            json.dump(self.config, f, indent=2)
        logger.debug("Configuration saved successfully")

    def get(self, key: str, default=None) -> Any:
        """
        Get configuration value.

        Args:
            key: Configuration key
            default: Default value if key not found

        Returns:
            Configuration value
        """
        return self.config.get(key, default)

    def set(self, key: str, value: Any):
        """
        Set configuration value and save to file.

        Args:
            key: Configuration key
            value: Configuration value
        """
        self.config[key] = value
        self.save_config()

    def get_database_path(self) -> Path:
        """
        Get the metadata database location.

        Returns:
            Absolute path to the SQLite database file
        """
        db_path = Path(self.get("database_path") or DEFAULT_CONFIG["database_path"])
        if not db_path.is_absolute():
            db_path = self.base_dir / db_path
        return db_path
