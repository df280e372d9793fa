"""Example usage of the orchestrator with the what-if toolkit."""

from pathlib import Path

from anyconnect_deploy.config import DeployConfig, DeploymentType, DeployMode, Module, PackageLayout
from anyconnect_deploy.orchestrator import DeploymentOrchestrator, exit_code_for
from anyconnect_deploy.toolkit import DeploymentSession, WhatIfToolkit


def example_install_preview():
    """Example: Preview a full install with a VPN profile."""
    print("=== Install preview ===")

    config = DeployConfig(package=PackageLayout(vpn_profile="corp-vpn.xml"))
    session = DeploymentSession(
        deployment_type=DeploymentType.INSTALL,
        deploy_mode=DeployMode.INTERACTIVE,
        app=config.app,
        package_root=Path("C:/Packages/AnyConnect"),
    )
    toolkit = WhatIfToolkit(session)

    # Skip the NAM settle delay in a preview
    orchestrator = DeploymentOrchestrator(config, toolkit, sleep=lambda seconds: None)
    result = orchestrator.run(DeploymentType.INSTALL, {Module.ALL})

    print(f"Steps: {', '.join(result.context.completed_steps)}")
    print(f"Exit code: {exit_code_for(result)}")


def example_uninstall_preview():
    """Example: Preview removing only the NAM module."""
    print("\n=== Uninstall preview ===")

    config = DeployConfig()
    session = DeploymentSession(
        deployment_type=DeploymentType.UNINSTALL,
        deploy_mode=DeployMode.SILENT,
        app=config.app,
    )
    toolkit = WhatIfToolkit(session)

    result = DeploymentOrchestrator(config, toolkit).run(DeploymentType.UNINSTALL, {Module.NAM})

    print(f"Calls: {len(toolkit.calls)}")
    print(f"Exit code: {exit_code_for(result)}")


if __name__ == '__main__':
    example_install_preview()
    example_uninstall_preview()
