"""Error handling framework for deployment operations."""

import subprocess
from typing import Optional, Dict, Any, List
from enum import Enum
from dataclasses import dataclass, asdict
from anyconnect_deploy.utils.logging import get_logger

logger = get_logger(__name__)


class ErrorCategory(Enum):
    """Categories of errors that can occur during deployment."""
    TOOLKIT_LOAD = "toolkit_load"
    CONFIGURATION = "configuration"
    INSTALLER = "installer"
    PROCESS = "process"
    SERVICE = "service"
    FILESYSTEM = "filesystem"
    UNKNOWN = "unknown"


class ErrorSeverity(Enum):
    """Severity levels for errors."""
    CRITICAL = "critical"  # Deployment cannot start
    ERROR = "error"  # Deployment aborted
    WARNING = "warning"  # Non-fatal issue
    INFO = "info"  # Informational message


@dataclass
class ErrorContext:
    """Context information for an error."""
    module: Optional[str] = None
    operation: Optional[str] = None
    package_path: Optional[str] = None
    install_phase: Optional[str] = None
    additional_info: Optional[Dict[str, Any]] = None


class DeploymentError(Exception):
    """Base exception for deployment errors."""

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.UNKNOWN,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: Optional[ErrorContext] = None,
        cause: Optional[Exception] = None,
        suggestions: Optional[List[str]] = None
    ):
        """Initialize deployment error.

        Args:
            message: Human-readable error message
            category: Error category
            severity: Error severity
            context: Additional context about the error
            cause: Original exception that caused this error
            suggestions: List of suggested fixes
        """
        super().__init__(message)
        self.message = message
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.cause = cause
        self.suggestions = suggestions or []

    def to_user_message(self) -> str:
        """Convert error to user-friendly message.

        Returns:
            Formatted error message for display to user
        """
        lines = [f"{self.severity.value.upper()}: {self.message}"]

        if self.context.install_phase:
            lines.append(f"   Phase: {self.context.install_phase}")
        if self.context.module:
            lines.append(f"   Module: {self.context.module}")
        if self.context.operation:
            lines.append(f"   Operation: {self.context.operation}")
        if self.context.package_path:
            lines.append(f"   Package: {self.context.package_path}")

        if self.cause:
            lines.append(f"   Cause: {str(self.cause)}")

        if self.suggestions:
            lines.append("\nSuggested fixes:")
            for i, suggestion in enumerate(self.suggestions, 1):
                lines.append(f"   {i}. {suggestion}")

        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for logging/serialization.

        Returns:
            Dictionary representation of the error
        """
        return {
            'message': self.message,
            'category': self.category.value,
            'severity': self.severity.value,
            'context': asdict(self.context),
            'cause': str(self.cause) if self.cause else None,
            'suggestions': self.suggestions
        }


class ToolkitLoadError(DeploymentError):
    """The deployment toolkit could not be loaded."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault('suggestions', [
            'Check that the AppDeployToolkit folder sits next to the package files',
            'Verify AppDeployToolkitMain.py defines create_toolkit(session)'
        ])
        super().__init__(
            message,
            category=ErrorCategory.TOOLKIT_LOAD,
            severity=ErrorSeverity.CRITICAL,
            **kwargs
        )


class ConfigurationError(DeploymentError):
    """Error in the package configuration."""

    def __init__(self, message: str, **kwargs):
        super().__init__(
            message,
            category=ErrorCategory.CONFIGURATION,
            severity=ErrorSeverity.CRITICAL,
            **kwargs
        )


class InstallerError(DeploymentError):
    """An MSI action returned a failure exit code."""

    def __init__(self, message: str, exit_code: Optional[int] = None, **kwargs):
        super().__init__(
            message,
            category=ErrorCategory.INSTALLER,
            severity=ErrorSeverity.ERROR,
            **kwargs
        )
        self.exit_code = exit_code


class ErrorHandler:
    """Converts arbitrary exceptions into categorized deployment errors."""

    # Windows Installer exit codes seen in the field
    MSI_ERROR_MAPPING = {
        1601: 'The Windows Installer service could not be accessed',
        1602: 'User cancelled installation',
        1603: 'Fatal error during installation',
        1605: 'This action is only valid for products that are currently installed',
        1618: 'Another installation is already in progress',
        1619: 'This installation package could not be opened',
        1620: 'This installation package could not be opened (invalid package)',
        1638: 'Another version of this product is already installed',
    }

    def __init__(self):
        """Initialize error handler."""
        self.logger = get_logger(__name__)

    def handle_exception(
        self,
        error: Exception,
        context: Optional[ErrorContext] = None
    ) -> DeploymentError:
        """Handle an exception and convert to DeploymentError.

        Args:
            error: The exception to handle
            context: Additional context about where the error occurred

        Returns:
            DeploymentError with categorization and suggestions
        """
        context = context or ErrorContext()

        if isinstance(error, DeploymentError):
            if context.install_phase and not error.context.install_phase:
                error.context.install_phase = context.install_phase
            return error

        if isinstance(error, subprocess.CalledProcessError):
            return DeploymentError(
                message=f"Command failed with exit code {error.returncode}: {error.cmd}",
                category=ErrorCategory.PROCESS,
                context=context,
                cause=error,
                suggestions=['Run the command manually to see its output']
            )

        if isinstance(error, FileNotFoundError):
            return DeploymentError(
                message=f"File not found: {error.filename or error}",
                category=ErrorCategory.FILESYSTEM,
                context=context,
                cause=error,
                suggestions=['Check that every MSI listed in deploy.yaml is in the Files folder']
            )

        if isinstance(error, PermissionError):
            return DeploymentError(
                message=f"Access denied: {error.filename or error}",
                category=ErrorCategory.FILESYSTEM,
                context=context,
                cause=error,
                suggestions=['Run the deployment from an elevated session']
            )

        if isinstance(error, OSError):
            return DeploymentError(
                message=str(error),
                category=ErrorCategory.FILESYSTEM,
                context=context,
                cause=error
            )

        return DeploymentError(
            message=str(error) or error.__class__.__name__,
            category=ErrorCategory.UNKNOWN,
            severity=ErrorSeverity.ERROR,
            context=context,
            cause=error,
            suggestions=['Check logs for more details']
        )

    def describe_msi_exit_code(self, exit_code: int) -> str:
        """Return a readable description for an MSI exit code."""
        return self.MSI_ERROR_MAPPING.get(exit_code, f"Windows Installer returned {exit_code}")

    def log_error(self, error: DeploymentError):
        """Log an error with appropriate level.

        Args:
            error: The error to log
        """
        log_message = error.to_user_message()

        if error.severity in (ErrorSeverity.CRITICAL, ErrorSeverity.ERROR):
            self.logger.error(log_message)
        elif error.severity == ErrorSeverity.WARNING:
            self.logger.warning(log_message)
        else:
            self.logger.info(log_message)

        self.logger.debug(f"Error details: {error.to_dict()}")


# Global error handler instance
error_handler = ErrorHandler()
