"""Contract between the deployment orchestrator and the deployment toolkit."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional

from anyconnect_deploy.config.models import AppMetadata, DeploymentType, DeployMode


class MsiAction(str, Enum):
    """Action passed to the toolkit's MSI wrapper."""
    INSTALL = "Install"
    UNINSTALL = "Uninstall"
    REPAIR = "Repair"
    PATCH = "Patch"


class LogSeverity(int, Enum):
    """Severity understood by the toolkit's log writer."""
    INFO = 1
    WARNING = 2
    ERROR = 3


@dataclass
class DeploymentSession:
    """Everything the toolkit needs to know about this run."""
    deployment_type: DeploymentType
    deploy_mode: DeployMode
    app: AppMetadata = field(default_factory=AppMetadata)
    package_root: Path = field(default_factory=Path.cwd)
    allow_reboot_pass_thru: bool = False
    terminal_server_mode: bool = False
    disable_logging: bool = False


class DeploymentToolkit(ABC):
    """Base class for toolkits that perform the actual deployment actions.

    Every call blocks until the toolkit has finished the action.
    """

    def __init__(self, session: DeploymentSession):
        """Initialize toolkit with the deployment session.

        Args:
            session: Session describing the current run
        """
        self.session = session

    @abstractmethod
    def show_installation_welcome(
        self,
        close_apps: List[str],
        allow_defer: bool = False,
        defer_times: int = 0,
        close_apps_countdown: Optional[int] = None,
        force_close_apps_countdown: Optional[int] = None,
        persist_prompt: bool = False
    ) -> None:
        """Prompt the user to close running applications.

        Args:
            close_apps: Process names (without .exe) that must be closed
            allow_defer: Whether the user may postpone the deployment
            defer_times: Number of deferrals allowed
            close_apps_countdown: Seconds before apps are closed when no deferral is allowed
            force_close_apps_countdown: Seconds before apps are closed even when deferral is allowed
            persist_prompt: Keep the prompt on top until answered
        """
        pass

    @abstractmethod
    def show_installation_progress(self, status_message: Optional[str] = None) -> None:
        """Show or update the progress indicator."""
        pass

    @abstractmethod
    def execute_msi(
        self,
        action: MsiAction,
        path: str,
        parameters: Optional[str] = None,
        transform: Optional[str] = None
    ) -> int:
        """Run a Windows Installer action against a package.

        Args:
            action: Install, Uninstall, Repair or Patch
            path: Path to the .msi (or .msp for Patch)
            parameters: Command-line parameters replacing the toolkit defaults
            transform: Optional .mst transform

        Returns:
            The Windows Installer exit code
        """
        pass

    @abstractmethod
    def copy_file(self, source: str, destination: str) -> None:
        """Copy a file, creating the destination folder if needed."""
        pass

    @abstractmethod
    def remove_folder(self, path: str) -> None:
        """Remove a folder and its contents if it exists."""
        pass

    @abstractmethod
    def restart_service(self, name: str) -> None:
        """Stop and start a service together with its dependent services."""
        pass

    @abstractmethod
    def execute_process_as_user(self, path: str, parameters: Optional[str] = None) -> None:
        """Launch a process in the logged-on user's session."""
        pass

    @abstractmethod
    def show_installation_prompt(
        self,
        message: str,
        button_text: str = "OK",
        icon: str = "Information",
        no_wait: bool = False
    ) -> None:
        """Show an informational prompt."""
        pass

    @abstractmethod
    def show_dialog_box(self, text: str, icon: str = "Stop") -> None:
        """Show a blocking dialog."""
        pass

    @abstractmethod
    def write_log(
        self,
        message: str,
        severity: LogSeverity = LogSeverity.INFO,
        source: Optional[str] = None
    ) -> None:
        """Write a line to the toolkit log."""
        pass

    def exit_script(self, exit_code: int) -> None:
        """Finalize the toolkit session before the process exits.

        Args:
            exit_code: Code the process is about to exit with
        """
        # Default implementation - toolkits with open dialogs should override
        return None
