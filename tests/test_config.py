# -*- coding: utf-8 -*-
"""
Tests for the package configuration models and YAML loader.
"""

import pytest
from pydantic import ValidationError

from anyconnect_deploy.config.models import (
    AppMetadata,
    DeployConfig,
    Module,
    PackageLayout,
)
from anyconnect_deploy.config.parser import Config, ConfigValidationError


class TestModels:
    """Tests for the configuration models."""

    def test_defaults(self):
        config = DeployConfig()

        assert config.use_default_msi is False
        assert config.package.defer_times == 3
        assert config.package.repair_close_apps_countdown == 60
        assert config.package.nam_settle_seconds == 10
        assert config.package_file("Base") == "anyconnect-win-4.10.07061-core-vpn-predeploy-k9.msi"

    def test_install_name_and_title(self):
        app = AppMetadata()

        assert app.install_name == "Cisco_AnyConnectSecureMobilityClient_4.10.07061_x86_EN_01"
        assert app.install_title == "Cisco AnyConnect Secure Mobility Client 4.10.07061"

    def test_package_file_follows_version(self):
        config = DeployConfig(app=AppMetadata(version="5.1.2.42"))

        assert config.package_file("NAM") == "anyconnect-win-5.1.2.42-nam-predeploy-k9.msi"
        assert config.package_file("Unknown") is None

    def test_nam_delay_cannot_drop_below_ten_seconds(self):
        with pytest.raises(ValidationError):
            PackageLayout(nam_settle_seconds=5)

    def test_transform_requires_default_msi(self):
        with pytest.raises(ValidationError, match="default_mst requires default_msi"):
            PackageLayout(default_mst="vpn.mst")

    def test_unknown_module_package_rejected(self):
        with pytest.raises(ValidationError, match="Unknown module"):
            PackageLayout(module_packages={"Umbrella": "umbrella.msi"})

    def test_web_security_has_no_package(self):
        assert DeployConfig().package_file("WSM") is None
        with pytest.raises(ValidationError, match="Unknown module 'WSM'"):
            PackageLayout(module_packages={"WSM": "websecurity.msi"})

    def test_process_names_lose_exe_suffix(self):
        assert PackageLayout(close_apps=["vpnui.exe"]).close_apps == ["vpnui"]

    def test_module_parse_is_case_insensitive(self):
        assert Module.parse("posture") is Module.POSTURE
        assert Module.parse(" nam ") is Module.NAM
        with pytest.raises(ValueError, match="Unknown module"):
            Module.parse("Umbrella")


class TestConfig:
    """Tests for loading deploy.yaml."""

    def test_missing_optional_file_uses_defaults(self, tmp_path):
        config = Config(str(tmp_path / "deploy.yaml")).load(required=False)

        assert config.deploy == DeployConfig()

    def test_missing_required_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            Config(str(tmp_path / "deploy.yaml")).load()

    def test_load_overrides(self, tmp_path):
        path = tmp_path / "deploy.yaml"
        path.write_text(
            "app:\n"
            "  version: \"4.10.08025\"\n"
            "package:\n"
            "  default_msi: vpn.msi\n"
            "  vpn_profile: corp.xml\n"
        )

        config = Config(str(path)).load()

        assert config.deploy.app.version == "4.10.08025"
        assert config.deploy.use_default_msi is True
        assert config.deploy.package.vpn_profile == "corp.xml"

    def test_validation_errors_are_collected(self, tmp_path):
        path = tmp_path / "deploy.yaml"
        path.write_text(
            "app:\n"
            "  architecture: arm64\n"
            "package:\n"
            "  defer_times: -1\n"
            "extras: true\n"
        )

        with pytest.raises(ConfigValidationError) as excinfo:
            Config(str(path)).load()

        locations = [error["loc"][0] for error in excinfo.value.errors]
        assert sorted(locations) == ["app", "extras", "package"]
        assert "3 error(s)" in str(excinfo.value)

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "deploy.yaml"
        path.write_text("app: [unclosed\n")

        with pytest.raises(ConfigValidationError, match="Failed to parse YAML"):
            Config(str(path)).load()
