"""AnyConnect deployment wrapper.

Installs, uninstalls or repairs the AnyConnect Secure Mobility Client and its
optional modules by sequencing calls to a deployment toolkit loaded from the
package folder.
"""

__version__ = "1.0.0"

from anyconnect_deploy.config import DeployConfig, DeploymentType, DeployMode, Module
from anyconnect_deploy.orchestrator import DeploymentOrchestrator, DeploymentResult, exit_code_for
from anyconnect_deploy.toolkit import DeploymentSession, DeploymentToolkit, MsiAction, load_toolkit

__all__ = [
    '__version__',
    'DeployConfig',
    'DeploymentType',
    'DeployMode',
    'Module',
    'DeploymentOrchestrator',
    'DeploymentResult',
    'exit_code_for',
    'DeploymentSession',
    'DeploymentToolkit',
    'MsiAction',
    'load_toolkit',
]
