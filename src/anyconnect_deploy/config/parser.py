"""YAML configuration parser for the deployment package."""

from pathlib import Path
from typing import Dict, List, Optional

import yaml
from pydantic import ValidationError

from .models import AppMetadata, DeployConfig, PackageLayout


CONFIG_FILE_NAME = "deploy.yaml"


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
    """Configuration manager for a deployment package."""

    SECTIONS = {"app": AppMetadata, "package": PackageLayout}

    def __init__(self, config_path: str):
        """Initialize configuration manager.

        Args:
            config_path: Path to deploy.yaml
        """
        self.config_path = Path(config_path)
        self.data: Dict = {}
        self.deploy: DeployConfig = DeployConfig()

    def load(self, required: bool = True) -> "Config":
        """Load and validate configuration from YAML file.

        Args:
            required: Raise if the file is missing instead of using defaults

        Returns:
            Self for method chaining

        Raises:
            ConfigValidationError: If configuration is invalid
            FileNotFoundError: If a required configuration file doesn't exist
        """
        if not self.config_path.exists():
            if required:
                raise FileNotFoundError(f"Configuration file not found: {self.config_path}")
            self.data = {}
            self.deploy = DeployConfig()
            return self

        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                self.data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigValidationError(f"Failed to parse YAML: {e}")

        validation_errors = self.validate()
        if validation_errors:
            raise ConfigValidationError(
                f"Configuration validation failed with {len(validation_errors)} error(s)",
                validation_errors,
            )

        self.deploy = DeployConfig(**self.data)
        return self

    def validate(self) -> List[Dict]:
        """Validate configuration against schema.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if not isinstance(self.data, dict):
            return [{"loc": [], "msg": "Configuration must be a mapping"}]

        for key in self.data:
            if key not in self.SECTIONS:
                errors.append(
                    {"loc": [key], "msg": f"Unknown section '{key}'. Expected: app, package"}
                )

        for section, model in self.SECTIONS.items():
            if section not in self.data:
                continue
            section_data = self.data[section]
            if not isinstance(section_data, dict):
                errors.append({"loc": [section], "msg": f"'{section}' must be a mapping"})
                continue
            try:
                model(**section_data)
            except ValidationError as e:
                for error in e.errors():
                    errors.append(
                        {
                            "loc": [section] + list(error["loc"]),
                            "msg": error["msg"],
                        }
                    )

        return errors
