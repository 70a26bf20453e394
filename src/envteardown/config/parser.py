"""YAML configuration parser for envteardown."""

from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import ValidationError

from .models import Settings


class ConfigValidationError(Exception):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, errors: Optional[List[Dict]] = None):
        self.message = message
        self.errors = errors or []
        super().__init__(self.message)

    def __str__(self) -> str:
        """Format validation errors for display."""
        if not self.errors:
            return self.message

        error_lines = [self.message, ""]
        for error in self.errors:
            location = " -> ".join(str(loc) for loc in error.get("loc", []))
            msg = error.get("msg", "Unknown error")
            error_lines.append(f"  - {location}: {msg}")

        return "\n".join(error_lines)


class Config:
    """Configuration manager for envteardown."""

    def __init__(self, config_path: str = "envteardown.yaml"):
        """Initialize configuration manager.

        Args:
            config_path: Path to envteardown.yaml; a missing file means defaults
        """
        self.config_path = Path(config_path)
        self.data: Dict[str, Any] = {}
        self.settings: Settings = Settings()

    def load(self, overrides: Optional[Dict[str, Any]] = None) -> "Config":
        """Load and validate configuration.

        Args:
            overrides: Values that win over the file (e.g. command line options);
                None values are ignored

        Returns:
            Self for method chaining

        Raises:
            ConfigValidationError: If configuration is invalid
        """
        if self.config_path.exists():
            try:
                with open(self.config_path, "r") as f:
                    self.data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigValidationError(f"Failed to parse YAML: {e}")

            if not isinstance(self.data, dict):
                raise ConfigValidationError(
                    f"Configuration file {self.config_path} must contain a mapping"
                )

        merged = dict(self.data)
        for key, value in (overrides or {}).items():
            if value is not None:
                merged[key] = value

        try:
            self.settings = Settings(**merged)
        except ValidationError as e:
            raise ConfigValidationError(
                f"Configuration validation failed with {len(e.errors())} error(s)",
                [{"loc": list(error["loc"]), "msg": error["msg"]} for error in e.errors()],
            )

        return self
