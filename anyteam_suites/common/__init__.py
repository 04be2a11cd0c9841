"""Shared configuration, logging and test data."""

from .config_loader import ConfigLoader, ConfigurationError

__all__ = [
    "ConfigLoader",
    "ConfigurationError",
]
