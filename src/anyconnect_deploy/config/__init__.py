"""Configuration management for the deployment package."""

from .models import (
    DeploymentType,
    DeployMode,
    Module,
    DEFAULT_MODULES,
    DART,
    AppMetadata,
    PackageLayout,
    DeployConfig,
)
from .parser import Config, ConfigValidationError, CONFIG_FILE_NAME

__all__ = [
    "DeploymentType",
    "DeployMode",
    "Module",
    "DEFAULT_MODULES",
    "DART",
    "AppMetadata",
    "PackageLayout",
    "DeployConfig",
    "Config",
    "ConfigValidationError",
    "CONFIG_FILE_NAME",
]
