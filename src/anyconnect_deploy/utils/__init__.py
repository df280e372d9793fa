"""Utility modules for logging and error handling."""

from anyconnect_deploy.utils.errors import (
    ErrorCategory,
    ErrorSeverity,
    ErrorContext,
    DeploymentError,
    ToolkitLoadError,
    ConfigurationError,
    InstallerError,
    ErrorHandler,
    error_handler
)
from anyconnect_deploy.utils.logging import get_logger, setup_logging, LogContext

__all__ = [
    # Errors
    'ErrorCategory',
    'ErrorSeverity',
    'ErrorContext',
    'DeploymentError',
    'ToolkitLoadError',
    'ConfigurationError',
    'InstallerError',
    'ErrorHandler',
    'error_handler',

    # Logging
    'get_logger',
    'setup_logging',
    'LogContext',
]
