"""Configuration management for ghbin.

This package provides:
- GlobalConfigManager: INI configuration management (global_config.py)
- Paths: Path constants and utilities (paths.py)
- Parser utilities: INI value converters and comments (parser.py)
"""

from ghbin.config.global_config import GlobalConfigManager
from ghbin.config.parser import ConfigCommentManager
from ghbin.config.paths import Paths
from ghbin.types import GlobalConfig

__all__ = [
    "ConfigCommentManager",
    "GlobalConfig",
    "GlobalConfigManager",
    "Paths",
]
