# tests/conftest.py
import io
import logging
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from rich.console import Console

from anyconnect_deploy.config.models import DeployConfig, DeploymentType, DeployMode
from anyconnect_deploy.orchestrator.orchestrator import DeploymentOrchestrator
from anyconnect_deploy.toolkit.base import DeploymentSession
from anyconnect_deploy.toolkit.what_if import WhatIfToolkit

PACKAGE_ROOT = Path("/packages/anyconnect")

TOOLKIT_TEMPLATE = '''
from anyconnect_deploy.toolkit.what_if import WhatIfToolkit


def create_toolkit(session):
    return WhatIfToolkit(session, msi_exit_code={exit_code})
'''


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers installed by setup_logging between tests."""
    factory = logging.getLogRecordFactory()
    yield
    logging.getLogger().handlers.clear()
    logging.setLogRecordFactory(factory)


@pytest.fixture
def session():
    return DeploymentSession(
        deployment_type=DeploymentType.INSTALL,
        deploy_mode=DeployMode.SILENT,
        package_root=PACKAGE_ROOT,
    )


@pytest.fixture
def toolkit(session):
    return WhatIfToolkit(session, console=Console(file=io.StringIO()))


@pytest.fixture
def config():
    return DeployConfig()


@pytest.fixture
def sleep():
    return MagicMock()


@pytest.fixture
def orchestrator(config, toolkit, sleep):
    return DeploymentOrchestrator(config, toolkit, sleep=sleep)


@pytest.fixture
def write_toolkit(tmp_path):
    """Create an AppDeployToolkit entry point under tmp_path."""

    def _write(source=None, exit_code=0):
        toolkit_dir = tmp_path / "AppDeployToolkit"
        toolkit_dir.mkdir(exist_ok=True)
        entry_point = toolkit_dir / "AppDeployToolkitMain.py"
        entry_point.write_text(source if source is not None else TOOLKIT_TEMPLATE.format(exit_code=exit_code))
        return entry_point

    return _write


@pytest.fixture
def msi_calls():
    """(action, file name) for every MSI call a toolkit recorded."""

    def _calls(toolkit):
        return [
            (call.arguments["action"], Path(call.arguments["path"]).name)
            for call in toolkit.calls
            if call.name == "execute_msi"
        ]

    return _calls


@pytest.fixture
def package_toolkit(tmp_path):
    """What-if toolkit for a package folder on disk with an empty Files directory."""
    (tmp_path / "Files").mkdir()
    package_session = DeploymentSession(
        deployment_type=DeploymentType.INSTALL,
        deploy_mode=DeployMode.SILENT,
        package_root=tmp_path,
    )
    return WhatIfToolkit(package_session, console=Console(file=io.StringIO()))
