"""Main CLI entry point."""

import sys
import time
from pathlib import Path
from typing import Optional, Tuple

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from anyconnect_deploy.config.models import (
    DEFAULT_MODULES,
    DeployMode,
    DeploymentType,
    Module,
)
from anyconnect_deploy.config.parser import Config, ConfigValidationError, CONFIG_FILE_NAME
from anyconnect_deploy.orchestrator.context import (
    DeploymentResult,
    EXIT_INVALID_CONFIGURATION,
    EXIT_TOOLKIT_LOAD_FAILED,
    EXIT_UNHANDLED_ERROR,
    exit_code_for,
)
from anyconnect_deploy.orchestrator.orchestrator import DeploymentOrchestrator
from anyconnect_deploy.toolkit.base import DeploymentSession, DeploymentToolkit
from anyconnect_deploy.toolkit.loader import load_toolkit
from anyconnect_deploy.toolkit.what_if import WhatIfToolkit
from anyconnect_deploy.utils.errors import ErrorContext, ToolkitLoadError, error_handler
from anyconnect_deploy.utils.logging import setup_logging, get_logger

console = Console(stderr=True)
logger = get_logger(__name__)


def parse_modules(ctx, param, value: Tuple[str, ...]) -> frozenset:
    """Accept repeated and comma-separated module names."""
    if not value:
        return DEFAULT_MODULES
    modules = set()
    for item in value:
        for name in item.split(','):
            if not name.strip():
                continue
            try:
                modules.add(Module.parse(name))
            except ValueError as e:
                raise click.BadParameter(str(e))
    return frozenset(modules) or DEFAULT_MODULES


def load_config(config_path: Optional[str], package_root: Path) -> Config:
    """Load deploy.yaml, falling back to defaults when none is present."""
    explicit = config_path is not None
    path = Path(config_path) if explicit else package_root / CONFIG_FILE_NAME
    try:
        return Config(str(path)).load(required=explicit)
    except FileNotFoundError:
        console.print(f"[red]Error:[/red] Configuration file not found: {path}")
        sys.exit(EXIT_INVALID_CONFIGURATION)
    except ConfigValidationError as e:
        console.print("[red]Configuration validation failed:[/red]\n")
        console.print(escape(str(e)))
        sys.exit(EXIT_INVALID_CONFIGURATION)


def skip_wait(seconds: float) -> None:
    """Stand-in for time.sleep during what-if runs."""
    logger.debug(f"what-if: skipping {seconds}s wait")


def create_toolkit(session: DeploymentSession, what_if: bool) -> DeploymentToolkit:
    """Load the package toolkit, or the what-if toolkit for previews."""
    if what_if:
        return WhatIfToolkit(session, console=console)
    try:
        return load_toolkit(session.package_root, session)
    except ToolkitLoadError as e:
        error_handler.log_error(e)
        console.print(f"[red]Toolkit failed to load:[/red] {escape(str(e))}")
        sys.exit(EXIT_TOOLKIT_LOAD_FAILED)


def print_summary(session: DeploymentSession, modules: frozenset, what_if: bool) -> None:
    """Display the deployment configuration panel."""
    console.print(Panel.fit(
        f"[bold]{session.deployment_type.value} {session.app.install_title}[/bold]\n"
        f"Deploy mode: {session.deploy_mode.value}\n"
        f"Modules: {', '.join(sorted(m.value for m in modules))}\n"
        f"Package root: {session.package_root}\n"
        f"Reboot pass-through: {'enabled' if session.allow_reboot_pass_thru else 'disabled'}\n"
        f"Terminal server mode: {'enabled' if session.terminal_server_mode else 'disabled'}"
        + ("\n[yellow]What-if: no changes will be made[/yellow]" if what_if else ""),
        title="Deployment Configuration",
        border_style="cyan"
    ))


def print_result(result: DeploymentResult, exit_code: int) -> None:
    """Display the outcome panel."""
    context = result.context
    steps = "\n".join(f"  {step}" for step in context.completed_steps) or "  (none)"
    if result.is_success():
        reboot = "\n[yellow]A reboot is required[/yellow]" if context.reboot_required else ""
        console.print(Panel.fit(
            f"[green]{context.deployment_type.value} successful[/green]\n\n"
            f"Steps:\n{steps}\n"
            f"Duration: {result.duration:.2f}s\n"
            f"Exit code: {exit_code}{reboot}",
            title="Deployment Complete",
            border_style="green"
        ))
    else:
        console.print(Panel.fit(
            f"[red]{context.deployment_type.value} failed during {context.install_phase}[/red]\n\n"
            f"{escape(result.error.message) if result.error else 'Unknown error'}\n\n"
            f"Completed steps:\n{steps}\n"
            f"Exit code: {exit_code}",
            title="Deployment Failed",
            border_style="red"
        ))


@click.command(context_settings={'help_option_names': ['-h', '--help']})
@click.option('--deployment-type', '-t', default=DeploymentType.INSTALL.value,
              type=click.Choice([t.value for t in DeploymentType], case_sensitive=False),
              help='Operation to perform')
@click.option('--deploy-mode', default=DeployMode.INTERACTIVE.value,
              type=click.Choice([m.value for m in DeployMode], case_sensitive=False),
              help='Interactive, Silent or NonInteractive')
@click.option('--allow-reboot-pass-thru', is_flag=True,
              help='Exit with 3010 when an installer requests a reboot')
@click.option('--terminal-server-mode', is_flag=True,
              help='Switch Remote Desktop Session Host to install mode')
@click.option('--disable-logging', is_flag=True, help='Do not write a log file')
@click.option('--deploy-modules', '-m', multiple=True, callback=parse_modules,
              help='Modules to deploy (All, Base, NAM, WSM, ISE, Posture, GINA); repeat or comma-separate')
@click.option('--package-root', default='.', type=click.Path(file_okay=False, path_type=Path),
              help='Folder holding AppDeployToolkit and Files')
@click.option('--config', 'config_path', default=None, help='Path to deploy.yaml')
@click.option('--what-if', is_flag=True, help='Print the toolkit calls without performing them')
@click.option('--log-level', default='info', type=click.Choice(['debug', 'info', 'warning', 'error']))
def cli(deployment_type, deploy_mode, allow_reboot_pass_thru, terminal_server_mode,
        disable_logging, deploy_modules, package_root, config_path, what_if, log_level):
    """Install, uninstall or repair the AnyConnect VPN client."""
    package_root = package_root.resolve()
    cfg = load_config(config_path, package_root)
    app = cfg.deploy.app

    try:
        log_file = setup_logging(
            log_level,
            log_dir=package_root / 'Logs',
            log_name=f"{app.install_name}_{deployment_type}",
            disable_file_logging=disable_logging
        )
        if log_file:
            logger.debug(f"Logging to {log_file}")

        session = DeploymentSession(
            deployment_type=DeploymentType(deployment_type),
            deploy_mode=DeployMode(deploy_mode),
            app=app,
            package_root=package_root,
            allow_reboot_pass_thru=allow_reboot_pass_thru,
            terminal_server_mode=terminal_server_mode,
            disable_logging=disable_logging
        )

        toolkit = create_toolkit(session, what_if)
        print_summary(session, deploy_modules, what_if)

        orchestrator = DeploymentOrchestrator(
            cfg.deploy, toolkit, sleep=skip_wait if what_if else time.sleep
        )
        result = orchestrator.run(session.deployment_type, deploy_modules)

        exit_code = exit_code_for(result, allow_reboot_pass_thru=allow_reboot_pass_thru)
        print_result(result, exit_code)
        toolkit.exit_script(exit_code)
    except Exception as e:
        error = error_handler.handle_exception(
            e, ErrorContext(operation=deployment_type, package_path=str(package_root))
        )
        error_handler.log_error(error)
        console.print(f"[red]Deployment failed:[/red] {escape(error.message)}")
        sys.exit(EXIT_UNHANDLED_ERROR)

    sys.exit(exit_code)


def main():
    """Console script entry point."""
    cli()


if __name__ == '__main__':
    main()
