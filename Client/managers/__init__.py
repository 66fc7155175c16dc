"""
NimbusSync Client - Managers Package

Contains manager classes for configuration and metadata persistence.

Author: NimbusSync Project
"""

from .config_manager import ConfigManager, DEFAULT_CONFIG
from .metadata_store import MetadataStore

__all__ = [
    'ConfigManager',
    'DEFAULT_CONFIG',
    'MetadataStore'
]
