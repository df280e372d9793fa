"""Pydantic models for the deployment package configuration."""

from enum import Enum
from typing import Dict, List, Optional
from pydantic import BaseModel, Field, field_validator, model_validator


class DeploymentType(str, Enum):
    """Operation requested by the caller."""

    INSTALL = "Install"
    UNINSTALL = "Uninstall"
    REPAIR = "Repair"


class DeployMode(str, Enum):
    """How much UI the toolkit may show."""

    INTERACTIVE = "Interactive"
    SILENT = "Silent"
    NON_INTERACTIVE = "NonInteractive"


class Module(str, Enum):
    """Selectable components of the VPN client package."""

    ALL = "All"
    BASE = "Base"
    NAM = "NAM"
    WSM = "WSM"
    ISE = "ISE"
    POSTURE = "Posture"
    GINA = "GINA"

    @classmethod
    def parse(cls, value: str) -> "Module":
        """Resolve a module name case-insensitively."""
        for member in cls:
            if member.value.lower() == value.strip().lower():
                return member
        valid = ", ".join(m.value for m in cls)
        raise ValueError(f"Unknown module '{value}'. Must be one of: {valid}")


DEFAULT_MODULES = frozenset({Module.BASE, Module.GINA})

# Removed together with the core client; never selected directly
DART = "DART"

CLIENT_DIR = r"Cisco\Cisco AnyConnect Secure Mobility Client"


class AppMetadata(BaseModel):
    """Application metadata shown in toolkit dialogs and log names."""

    vendor: str = Field("Cisco", min_length=1)
    name: str = Field("AnyConnect Secure Mobility Client", min_length=1)
    version: str = Field("4.10.07061", pattern=r"^[0-9]+(\.[0-9]+)*$")
    architecture: str = Field("x86", pattern="^(x86|x64)$")
    language: str = Field("EN", min_length=2, max_length=5)
    revision: str = "01"
    script_version: str = "1.0.0"
    script_date: str = "2026-10-16"
    script_author: str = "Desktop Engineering"

    @property
    def install_name(self) -> str:
        """Underscore-joined identifier used for log and registry names."""
        parts = [self.vendor, self.name, self.version, self.architecture, self.language, self.revision]
        return "_".join(parts).replace(" ", "")

    @property
    def install_title(self) -> str:
        """Title shown on toolkit dialogs."""
        return f"{self.vendor} {self.name} {self.version}"


def _default_module_packages() -> Dict[str, str]:
    return {
        Module.BASE.value: "anyconnect-win-{version}-core-vpn-predeploy-k9.msi",
        Module.GINA.value: "anyconnect-win-{version}-gina-predeploy-k9.msi",
        Module.NAM.value: "anyconnect-win-{version}-nam-predeploy-k9.msi",
        Module.POSTURE.value: "anyconnect-win-{version}-posture-predeploy-k9.msi",
        Module.ISE.value: "anyconnect-win-{version}-iseposture-predeploy-k9.msi",
        DART: "anyconnect-win-{version}-dart-predeploy-k9.msi",
    }


class PackageLayout(BaseModel):
    """Where the package files live and how each step is invoked."""

    files_dir: str = "Files"
    module_packages: Dict[str, str] = Field(default_factory=_default_module_packages)
    install_parameters: str = "/norestart /passive"
    uninstall_parameters: str = "/norestart /passive"
    module_properties: Dict[str, str] = Field(
        default_factory=lambda: {Module.BASE.value: "PRE_DEPLOY_DISABLE_VPN=0"}
    )

    default_msi: Optional[str] = None
    default_mst: Optional[str] = None

    close_apps: List[str] = Field(default_factory=lambda: ["vpnui"])
    defer_times: int = Field(3, ge=0)
    force_close_apps_countdown: int = Field(600, ge=0)
    repair_close_apps: List[str] = Field(default_factory=lambda: ["iexplore"])
    repair_close_apps_countdown: int = Field(60, ge=0)

    agent_service: str = "vpnagent"
    ui_helper_path: str = rf"C:\Program Files (x86)\{CLIENT_DIR}\vpnui.exe"
    completion_message: str = (
        "Installation complete. The VPN client is ready to connect."
    )

    client_data_dir: str = rf"C:\ProgramData\{CLIENT_DIR}"
    nam_data_dir: str = rf"C:\ProgramData\{CLIENT_DIR}\Network Access Manager"
    nam_settle_seconds: int = Field(10, ge=10)

    vpn_profile: Optional[str] = None
    profile_dir: str = rf"C:\ProgramData\{CLIENT_DIR}\Profile"
    nam_configuration: Optional[str] = None
    nam_config_dir: str = rf"C:\ProgramData\{CLIENT_DIR}\Network Access Manager\newConfigFiles"

    @field_validator("module_packages")
    @classmethod
    def validate_module_packages(cls, v: Dict[str, str]) -> Dict[str, str]:
        """Only packaged modules (plus DART) may have a package entry."""
        allowed = {m.value for m in Module if m not in (Module.ALL, Module.WSM)} | {DART}
        for key, filename in v.items():
            if key not in allowed:
                raise ValueError(
                    f"Unknown module '{key}' in module_packages. Must be one of: {', '.join(sorted(allowed))}"
                )
            if not filename.lower().endswith(".msi"):
                raise ValueError(f"Package for '{key}' must be an .msi file: {filename}")
        return v

    @field_validator("close_apps", "repair_close_apps")
    @classmethod
    def validate_process_names(cls, v: List[str]) -> List[str]:
        """Process names are given without the .exe suffix."""
        cleaned = []
        for name in v:
            if not name.strip():
                raise ValueError("Process names cannot be empty")
            cleaned.append(name[:-4] if name.lower().endswith(".exe") else name)
        return cleaned

    @model_validator(mode="after")
    def validate_default_package(self):
        """A transform is only meaningful with a default MSI."""
        if self.default_mst and not self.default_msi:
            raise ValueError("default_mst requires default_msi to be set")
        return self


class DeployConfig(BaseModel):
    """Complete deployment package configuration."""

    app: AppMetadata = Field(default_factory=AppMetadata)
    package: PackageLayout = Field(default_factory=PackageLayout)

    @property
    def use_default_msi(self) -> bool:
        """Whether a zero-config MSI was designated."""
        return bool(self.package.default_msi)

    def package_file(self, component: str) -> Optional[str]:
        """Resolve the MSI file name for a module, or None if not packaged."""
        template = self.package.module_packages.get(component)
        if not template:
            return None
        return template.format(version=self.app.version)
