"""Configuration management for envteardown."""

from .models import Settings
from .parser import Config, ConfigValidationError

__all__ = [
    "Settings",
    "Config",
    "ConfigValidationError",
]
