"""Run state shared by the orchestration phases, and the run result."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import FrozenSet, List, Optional

from anyconnect_deploy.config.models import DeploymentType, Module
from anyconnect_deploy.utils.errors import (
    ConfigurationError,
    DeploymentError,
    ToolkitLoadError,
)
from anyconnect_deploy.utils.logging import get_logger

logger = get_logger(__name__)


EXIT_SUCCESS = 0
EXIT_UNHANDLED_ERROR = 60001
EXIT_INVALID_CONFIGURATION = 60002
EXIT_TOOLKIT_LOAD_FAILED = 60008
EXIT_REBOOT_REQUIRED = 3010

# MSI exit codes that mean "succeeded, reboot needed"
MSI_REBOOT_CODES = frozenset({3010, 1641})
MSI_PRODUCT_NOT_INSTALLED = 1605


class ExecutionStatus(Enum):
    """Status of a deployment run."""
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    SUCCESS = "success"
    FAILED = "failed"


@dataclass
class DeploymentContext:
    """Mutable state of one run, passed explicitly through every phase."""

    deployment_type: DeploymentType
    modules: FrozenSet[Module]
    exit_code: int = EXIT_SUCCESS
    install_phase: str = "Initialization"
    reboot_required: bool = False
    completed_steps: List[str] = field(default_factory=list)

    def wants(self, module: Module) -> bool:
        """Whether a module was requested, directly or through All."""
        return Module.ALL in self.modules or module in self.modules

    def enter_phase(self, label: str) -> None:
        """Advance the informational phase label."""
        self.install_phase = label

    def set_exit_code(self, code: int) -> int:
        """Record an exit code; the first non-zero code wins.

        Returns:
            The exit code now held by the context
        """
        if code == EXIT_SUCCESS:
            return self.exit_code
        if self.exit_code != EXIT_SUCCESS:
            logger.debug(f"Exit code already set to {self.exit_code}, ignoring {code}")
            return self.exit_code
        self.exit_code = code
        return self.exit_code


@dataclass
class DeploymentResult:
    """Outcome of a deployment run."""

    status: ExecutionStatus
    context: DeploymentContext
    error: Optional[DeploymentError] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    duration: float = 0.0  # seconds

    def is_success(self) -> bool:
        """Check if the run was successful."""
        return self.status == ExecutionStatus.SUCCESS

    def is_failed(self) -> bool:
        """Check if the run failed."""
        return self.status == ExecutionStatus.FAILED


def exit_code_for_error(error: Exception) -> int:
    """Map an error raised before the workflow starts to the process exit code."""
    if isinstance(error, ToolkitLoadError):
        return EXIT_TOOLKIT_LOAD_FAILED
    if isinstance(error, ConfigurationError):
        return EXIT_INVALID_CONFIGURATION
    return EXIT_UNHANDLED_ERROR


def exit_code_for(result: DeploymentResult, allow_reboot_pass_thru: bool = False) -> int:
    """Map a run result to the process exit code.

    Args:
        result: Result returned by the orchestrator
        allow_reboot_pass_thru: Surface 3010 when an MSI asked for a reboot

    Returns:
        The exit code, also recorded on the result's context
    """
    context = result.context
    if result.is_failed():
        return context.set_exit_code(EXIT_UNHANDLED_ERROR)
    if context.reboot_required and allow_reboot_pass_thru:
        return context.set_exit_code(EXIT_REBOOT_REQUIRED)
    return context.exit_code
