"""Core module - configuration, logging and errors."""

from modelmeta.core.config import Settings, get_settings
from modelmeta.core.errors import ConfigurationError, MetadataError, UnsupportedTypeError

__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Errors
    "ConfigurationError",
    "MetadataError",
    "UnsupportedTypeError",
]
