"""Orchestrator module for install, uninstall and repair workflows."""

from anyconnect_deploy.orchestrator.context import (
    DeploymentContext,
    DeploymentResult,
    ExecutionStatus,
    EXIT_SUCCESS,
    EXIT_UNHANDLED_ERROR,
    EXIT_INVALID_CONFIGURATION,
    EXIT_TOOLKIT_LOAD_FAILED,
    EXIT_REBOOT_REQUIRED,
    exit_code_for,
    exit_code_for_error,
)
from anyconnect_deploy.orchestrator.steps import (
    INSTALL_ORDER,
    UNINSTALL_ORDER,
    select_install_modules,
    select_uninstall_components,
)
from anyconnect_deploy.orchestrator.orchestrator import DeploymentOrchestrator

__all__ = [
    # Run state
    'DeploymentContext',
    'DeploymentResult',
    'ExecutionStatus',

    # Exit codes
    'EXIT_SUCCESS',
    'EXIT_UNHANDLED_ERROR',
    'EXIT_INVALID_CONFIGURATION',
    'EXIT_TOOLKIT_LOAD_FAILED',
    'EXIT_REBOOT_REQUIRED',
    'exit_code_for',
    'exit_code_for_error',

    # Module ordering
    'INSTALL_ORDER',
    'UNINSTALL_ORDER',
    'select_install_modules',
    'select_uninstall_components',

    # Main orchestrator
    'DeploymentOrchestrator',
]
