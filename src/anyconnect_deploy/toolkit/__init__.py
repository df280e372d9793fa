"""Deployment toolkit contract, loader and what-if implementation."""

from anyconnect_deploy.toolkit.base import (
    DeploymentSession,
    DeploymentToolkit,
    LogSeverity,
    MsiAction,
)
from anyconnect_deploy.toolkit.loader import load_toolkit, toolkit_path, TOOLKIT_RELATIVE_PATH
from anyconnect_deploy.toolkit.what_if import ToolkitCall, WhatIfToolkit

__all__ = [
    'DeploymentSession',
    'DeploymentToolkit',
    'LogSeverity',
    'MsiAction',
    'load_toolkit',
    'toolkit_path',
    'TOOLKIT_RELATIVE_PATH',
    'ToolkitCall',
    'WhatIfToolkit',
]
