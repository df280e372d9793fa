"""Load the deployment toolkit from the package folder."""

import importlib.util
import sys
from pathlib import Path

from anyconnect_deploy.toolkit.base import DeploymentSession, DeploymentToolkit
from anyconnect_deploy.utils.errors import ToolkitLoadError, ErrorContext
from anyconnect_deploy.utils.logging import get_logger

logger = get_logger(__name__)

TOOLKIT_RELATIVE_PATH = Path("AppDeployToolkit") / "AppDeployToolkitMain.py"
TOOLKIT_MODULE_NAME = "_appdeploytoolkit_main"
TOOLKIT_FACTORY = "create_toolkit"


def toolkit_path(package_root: Path) -> Path:
    """Return where the toolkit entry point must live for a package."""
    return Path(package_root) / TOOLKIT_RELATIVE_PATH


def load_toolkit(package_root: Path, session: DeploymentSession) -> DeploymentToolkit:
    """Import the toolkit entry point and create a toolkit for the session.

    The entry point is a Python file at a fixed path relative to the package
    root. It must define ``create_toolkit(session)`` returning a
    :class:`DeploymentToolkit`.

    Args:
        package_root: Folder holding the deployment package
        session: Session handed to the toolkit factory

    Returns:
        Ready-to-use toolkit

    Raises:
        ToolkitLoadError: If the entry point is missing or unusable
    """
    path = toolkit_path(package_root)
    context = ErrorContext(operation="load_toolkit", package_path=str(path))

    if not path.is_file():
        raise ToolkitLoadError(f"Toolkit entry point not found: {path}", context=context)

    logger.debug(f"Loading toolkit from {path}")

    spec = importlib.util.spec_from_file_location(TOOLKIT_MODULE_NAME, path)
    if spec is None or spec.loader is None:
        raise ToolkitLoadError(f"Cannot import toolkit entry point: {path}", context=context)

    module = importlib.util.module_from_spec(spec)
    sys.modules[TOOLKIT_MODULE_NAME] = module
    try:
        toolkit = _create_toolkit(module, spec.loader, session, context)
    except ToolkitLoadError:
        sys.modules.pop(TOOLKIT_MODULE_NAME, None)
        raise

    logger.info(f"Loaded toolkit {type(toolkit).__name__}")
    return toolkit


def _create_toolkit(module, loader, session: DeploymentSession, context: ErrorContext) -> DeploymentToolkit:
    try:
        loader.exec_module(module)
    except Exception as e:
        raise ToolkitLoadError(
            f"Toolkit entry point failed to import: {e}",
            context=context,
            cause=e
        ) from e

    factory = getattr(module, TOOLKIT_FACTORY, None)
    if not callable(factory):
        raise ToolkitLoadError(
            f"Toolkit entry point does not define {TOOLKIT_FACTORY}(session): {context.package_path}",
            context=context
        )

    try:
        toolkit = factory(session)
    except Exception as e:
        raise ToolkitLoadError(
            f"Toolkit factory raised an error: {e}",
            context=context,
            cause=e
        ) from e

    if not isinstance(toolkit, DeploymentToolkit):
        raise ToolkitLoadError(
            f"{TOOLKIT_FACTORY} returned {type(toolkit).__name__}, expected a DeploymentToolkit",
            context=context
        )

    return toolkit
