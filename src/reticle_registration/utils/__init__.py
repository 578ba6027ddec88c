"""
Utility Functions Module

Common utilities used across the reticle registration package:
- Logging setup
- Typed YAML configuration
"""

from .logging import setup_logger, configure_package_logging
from .config import load_config, AppConfig

__all__ = [
    "setup_logger",
    "configure_package_logging",
    "load_config",
    "AppConfig",
]
