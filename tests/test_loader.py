# -*- coding: utf-8 -*-
"""
Tests for loading the deployment toolkit from the package folder.
"""

import sys

import pytest

from anyconnect_deploy.config.models import DeploymentType, DeployMode
from anyconnect_deploy.toolkit.base import DeploymentSession
from anyconnect_deploy.toolkit.loader import TOOLKIT_MODULE_NAME, load_toolkit, toolkit_path
from anyconnect_deploy.toolkit.what_if import WhatIfToolkit
from anyconnect_deploy.utils.errors import ErrorCategory, ToolkitLoadError


@pytest.fixture
def package_session(tmp_path):
    return DeploymentSession(
        deployment_type=DeploymentType.INSTALL,
        deploy_mode=DeployMode.SILENT,
        package_root=tmp_path,
    )


def test_toolkit_path_is_fixed(tmp_path):
    assert toolkit_path(tmp_path) == tmp_path / "AppDeployToolkit" / "AppDeployToolkitMain.py"


def test_load_valid_toolkit(tmp_path, package_session, write_toolkit):
    write_toolkit(exit_code=0)

    toolkit = load_toolkit(tmp_path, package_session)

    assert isinstance(toolkit, WhatIfToolkit)
    assert toolkit.session is package_session


def test_missing_entry_point(tmp_path, package_session):
    with pytest.raises(ToolkitLoadError) as excinfo:
        load_toolkit(tmp_path, package_session)

    assert excinfo.value.category == ErrorCategory.TOOLKIT_LOAD
    assert "not found" in str(excinfo.value)


def test_entry_point_that_fails_to_import(tmp_path, package_session, write_toolkit):
    write_toolkit(source="raise ImportError('toolkit extension missing')\n")

    with pytest.raises(ToolkitLoadError) as excinfo:
        load_toolkit(tmp_path, package_session)

    assert "toolkit extension missing" in str(excinfo.value)
    assert isinstance(excinfo.value.cause, ImportError)


def test_entry_point_without_factory(tmp_path, package_session, write_toolkit):
    write_toolkit(source="TOOLKIT_VERSION = '3.10'\n")

    with pytest.raises(ToolkitLoadError, match="create_toolkit"):
        load_toolkit(tmp_path, package_session)


def test_factory_returning_wrong_type(tmp_path, package_session, write_toolkit):
    write_toolkit(source="def create_toolkit(session):\n    return object()\n")

    with pytest.raises(ToolkitLoadError, match="expected a DeploymentToolkit"):
        load_toolkit(tmp_path, package_session)


@pytest.mark.parametrize("source", [
    "raise ImportError('toolkit extension missing')\n",
    "TOOLKIT_VERSION = '3.10'\n",
    "def create_toolkit(session):\n    raise RuntimeError('no session')\n",
    "def create_toolkit(session):\n    return object()\n",
])
def test_failed_load_leaves_no_module_behind(tmp_path, package_session, write_toolkit, source):
    write_toolkit(source=source)

    with pytest.raises(ToolkitLoadError):
        load_toolkit(tmp_path, package_session)

    assert TOOLKIT_MODULE_NAME not in sys.modules
