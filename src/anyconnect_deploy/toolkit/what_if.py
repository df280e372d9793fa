"""Toolkit that records and prints actions instead of performing them."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.markup import escape

from anyconnect_deploy.toolkit.base import (
    DeploymentSession,
    DeploymentToolkit,
    LogSeverity,
    MsiAction,
)
from anyconnect_deploy.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class ToolkitCall:
    """A single recorded toolkit call."""
    name: str
    arguments: Dict[str, Any] = field(default_factory=dict)

    def describe(self) -> str:
        """One-line description for display."""
        args = ", ".join(f"{k}={v!r}" for k, v in self.arguments.items() if v is not None and v is not False and v != [])
        return f"{self.name}({args})"


class WhatIfToolkit(DeploymentToolkit):
    """Previews a deployment without touching the machine."""

    def __init__(
        self,
        session: DeploymentSession,
        console: Optional[Console] = None,
        msi_exit_code: int = 0
    ):
        """Initialize what-if toolkit.

        Args:
            session: Session describing the current run
            console: Rich console to print to (stderr console by default)
            msi_exit_code: Exit code reported for every MSI action
        """
        super().__init__(session)
        self.console = console or Console(stderr=True)
        self.msi_exit_code = msi_exit_code
        self.calls: List[ToolkitCall] = []

    def _record(self, call_name: str, **arguments: Any) -> None:
        call = ToolkitCall(name=call_name, arguments=arguments)
        self.calls.append(call)
        self.console.print(f"[dim]what-if:[/dim] [cyan]{escape(call.describe())}[/cyan]")
        logger.debug(f"what-if {call.describe()}")

    def call_names(self) -> List[str]:
        """Names of the recorded calls, in order."""
        return [call.name for call in self.calls]

    def show_installation_welcome(
        self,
        close_apps: List[str],
        allow_defer: bool = False,
        defer_times: int = 0,
        close_apps_countdown: Optional[int] = None,
        force_close_apps_countdown: Optional[int] = None,
        persist_prompt: bool = False
    ) -> None:
        self._record(
            "show_installation_welcome",
            close_apps=close_apps,
            allow_defer=allow_defer,
            defer_times=defer_times,
            close_apps_countdown=close_apps_countdown,
            force_close_apps_countdown=force_close_apps_countdown,
            persist_prompt=persist_prompt,
        )

    def show_installation_progress(self, status_message: Optional[str] = None) -> None:
        self._record("show_installation_progress", status_message=status_message)

    def execute_msi(
        self,
        action: MsiAction,
        path: str,
        parameters: Optional[str] = None,
        transform: Optional[str] = None
    ) -> int:
        self._record(
            "execute_msi",
            action=action.value,
            path=path,
            parameters=parameters,
            transform=transform,
        )
        return self.msi_exit_code

    def copy_file(self, source: str, destination: str) -> None:
        self._record("copy_file", source=source, destination=destination)

    def remove_folder(self, path: str) -> None:
        self._record("remove_folder", path=path)

    def restart_service(self, name: str) -> None:
        self._record("restart_service", name=name)

    def execute_process_as_user(self, path: str, parameters: Optional[str] = None) -> None:
        self._record("execute_process_as_user", path=path, parameters=parameters)

    def show_installation_prompt(
        self,
        message: str,
        button_text: str = "OK",
        icon: str = "Information",
        no_wait: bool = False
    ) -> None:
        self._record(
            "show_installation_prompt",
            message=message,
            button_text=button_text,
            icon=icon,
            no_wait=no_wait,
        )

    def show_dialog_box(self, text: str, icon: str = "Stop") -> None:
        self._record("show_dialog_box", text=text, icon=icon)

    def write_log(
        self,
        message: str,
        severity: LogSeverity = LogSeverity.INFO,
        source: Optional[str] = None
    ) -> None:
        self._record("write_log", message=message, severity=severity.name, source=source)

    def exit_script(self, exit_code: int) -> None:
        self._record("exit_script", exit_code=exit_code)
