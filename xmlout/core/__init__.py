"""
Settings and logging setup.
"""

from .config import OutputSettings, get_settings
from .logging import configure_logging

__all__ = [
    "OutputSettings",
    "get_settings",
    "configure_logging",
]
