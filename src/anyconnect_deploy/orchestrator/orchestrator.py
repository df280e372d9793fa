"""Main orchestrator that sequences toolkit calls for each deployment type."""

import time
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path, PureWindowsPath
from typing import Callable, Iterable, List, Optional, Tuple

from anyconnect_deploy.config.models import DeployConfig, DeploymentType, Module
from anyconnect_deploy.orchestrator.context import (
    DeploymentContext,
    DeploymentResult,
    ExecutionStatus,
    MSI_PRODUCT_NOT_INSTALLED,
    MSI_REBOOT_CODES,
)
from anyconnect_deploy.orchestrator.steps import (
    select_install_modules,
    select_uninstall_components,
    unpackaged_selection,
)
from anyconnect_deploy.toolkit.base import DeploymentToolkit, LogSeverity, MsiAction
from anyconnect_deploy.utils.errors import (
    ConfigurationError,
    ErrorContext,
    InstallerError,
    error_handler,
)
from anyconnect_deploy.utils.logging import LogContext, get_logger

logger = get_logger(__name__)

LOG_SOURCE = "Deploy-Application"


class DeploymentOrchestrator:
    """Runs the Pre/Main/Post phases of an install, uninstall or repair."""

    def __init__(
        self,
        config: DeployConfig,
        toolkit: DeploymentToolkit,
        sleep: Callable[[float], None] = time.sleep
    ):
        """Initialize deployment orchestrator.

        Args:
            config: Package configuration
            toolkit: Toolkit that performs every action
            sleep: Blocking wait used for the NAM settle delay
        """
        self.config = config
        self.package = config.package
        self.toolkit = toolkit
        self.sleep = sleep
        self.logger = get_logger(__name__)

    def run(
        self,
        deployment_type: DeploymentType,
        modules: Iterable[Module]
    ) -> DeploymentResult:
        """Run one deployment and report its outcome.

        Failures are not raised. They are logged, shown in a blocking
        dialog and returned on the result for the caller to map to an
        exit code.

        Args:
            deployment_type: Install, Uninstall or Repair
            modules: Requested module selection

        Returns:
            DeploymentResult
        """
        context = DeploymentContext(
            deployment_type=deployment_type,
            modules=frozenset(modules)
        )
        start_time = datetime.utcnow()

        self.logger.info(
            f"Starting {deployment_type.value} of {self.config.app.install_title} "
            f"(modules: {', '.join(sorted(m.value for m in context.modules)) or 'none'})"
        )

        try:
            if deployment_type == DeploymentType.UNINSTALL:
                self.uninstall(context)
            elif deployment_type == DeploymentType.REPAIR:
                self.repair(context)
            else:
                self.install(context)
        except Exception as e:
            error = error_handler.handle_exception(
                e, ErrorContext(install_phase=context.install_phase)
            )
            self._report_failure(error.to_user_message())
            end_time = datetime.utcnow()
            return DeploymentResult(
                status=ExecutionStatus.FAILED,
                context=context,
                error=error,
                start_time=start_time,
                end_time=end_time,
                duration=(end_time - start_time).total_seconds()
            )

        end_time = datetime.utcnow()
        self.logger.info(
            f"{deployment_type.value} completed in {(end_time - start_time).total_seconds():.1f}s"
        )
        return DeploymentResult(
            status=ExecutionStatus.SUCCESS,
            context=context,
            start_time=start_time,
            end_time=end_time,
            duration=(end_time - start_time).total_seconds()
        )

    # Install

    def install(self, context: DeploymentContext) -> None:
        """Pre-Installation, Installation and Post-Installation."""
        with self._phase(context, "Pre-Installation"):
            self.toolkit.show_installation_welcome(
                close_apps=self.package.close_apps,
                allow_defer=True,
                defer_times=self.package.defer_times,
                force_close_apps_countdown=self.package.force_close_apps_countdown,
                persist_prompt=True
            )
            self.toolkit.show_installation_progress()

        with self._phase(context, "Installation"):
            if self.config.use_default_msi:
                self._run_default_msi(context, MsiAction.INSTALL)

            for module in unpackaged_selection(context.modules):
                self.logger.warning(f"Module {module.value} has no installer in this package, skipping")

            for module, action in self._install_steps(context):
                with LogContext(self.logger, install_phase=context.install_phase, module_tag=module.value):
                    action(context)
                context.completed_steps.append(f"install:{module.value}")

        with self._phase(context, "Post-Installation"):
            self.toolkit.restart_service(self.package.agent_service)
            self.toolkit.execute_process_as_user(self.package.ui_helper_path)
            if not self.config.use_default_msi:
                self.toolkit.show_installation_prompt(
                    message=self.package.completion_message,
                    button_text="OK",
                    icon="Information",
                    no_wait=True
                )

    def _install_steps(
        self,
        context: DeploymentContext
    ) -> List[Tuple[Module, Callable[[DeploymentContext], None]]]:
        """Ordered (module, action) pairs for the requested modules."""
        actions = {
            Module.BASE: self._install_base,
            Module.NAM: self._install_nam,
        }
        return [
            (module, actions.get(module, self._module_installer(module)))
            for module in select_install_modules(context.modules)
        ]

    def _module_installer(self, module: Module) -> Callable[[DeploymentContext], None]:
        def install_module(context: DeploymentContext) -> None:
            self._install_component(context, module.value)
        return install_module

    def _install_base(self, context: DeploymentContext) -> None:
        self._install_component(context, Module.BASE.value)
        if self.package.vpn_profile:
            self._copy_package_file(
                self.package.vpn_profile,
                self._target_path(self.package.profile_dir, PureWindowsPath(self.package.vpn_profile).name)
            )

    def _install_nam(self, context: DeploymentContext) -> None:
        self._install_component(context, Module.NAM.value)
        self.logger.info(f"Waiting {self.package.nam_settle_seconds}s for Network Access Manager to settle")
        self.sleep(self.package.nam_settle_seconds)
        if self.package.nam_configuration:
            self._copy_package_file(
                self.package.nam_configuration,
                self._target_path(self.package.nam_config_dir, "configuration.xml")
            )

    def _copy_package_file(self, filename: str, destination: str) -> None:
        source = self._package_file(filename)
        if not Path(source).is_file():
            self.logger.warning(f"{source} is not in the package, not copying it to {destination}")
            return
        self.toolkit.copy_file(source, destination)

    def _install_component(self, context: DeploymentContext, component: str) -> None:
        parameters = self.package.install_parameters
        extra = self.package.module_properties.get(component)
        if extra:
            parameters = f"{parameters} {extra}"
        self._execute_msi(
            context,
            MsiAction.INSTALL,
            self._component_path(component),
            parameters=parameters,
            component=component
        )

    # Uninstall

    def uninstall(self, context: DeploymentContext) -> None:
        """Pre-Uninstallation, Uninstallation and Post-Uninstallation."""
        with self._phase(context, "Pre-Uninstallation"):
            self.toolkit.show_installation_welcome(
                close_apps=self.package.close_apps,
                allow_defer=True,
                defer_times=self.package.defer_times,
                force_close_apps_countdown=self.package.force_close_apps_countdown,
                persist_prompt=True
            )
            self.toolkit.show_installation_progress()

        with self._phase(context, "Uninstallation"):
            for component in select_uninstall_components(context.modules):
                with LogContext(self.logger, install_phase=context.install_phase, module_tag=component):
                    self._execute_msi(
                        context,
                        MsiAction.UNINSTALL,
                        self._component_path(component),
                        parameters=self.package.uninstall_parameters,
                        component=component
                    )
                    if component == Module.NAM.value:
                        self.toolkit.remove_folder(self.package.nam_data_dir)
                    elif component == Module.BASE.value:
                        self.toolkit.remove_folder(self.package.client_data_dir)
                context.completed_steps.append(f"uninstall:{component}")

        with self._phase(context, "Post-Uninstallation"):
            pass

    # Repair

    def repair(self, context: DeploymentContext) -> None:
        """Pre-Repair, Repair and Post-Repair."""
        with self._phase(context, "Pre-Repair"):
            self.toolkit.show_installation_welcome(
                close_apps=self.package.repair_close_apps,
                close_apps_countdown=self.package.repair_close_apps_countdown
            )
            self.toolkit.show_installation_progress()

        with self._phase(context, "Repair"):
            if self.config.use_default_msi:
                self._run_default_msi(context, MsiAction.REPAIR)
            else:
                self.logger.info("No default MSI configured, nothing to repair")

        with self._phase(context, "Post-Repair"):
            pass

    # Helpers

    @contextmanager
    def _phase(self, context: DeploymentContext, label: str):
        context.enter_phase(label)
        self.logger.debug(f"Entering phase {label}")
        with LogContext(self.logger, install_phase=label):
            yield

    def _run_default_msi(self, context: DeploymentContext, action: MsiAction) -> None:
        transform = None
        if self.package.default_mst:
            transform = self._package_file(self.package.default_mst)
        self._execute_msi(
            context,
            action,
            self._package_file(self.package.default_msi),
            transform=transform,
            component="default"
        )
        context.completed_steps.append(f"{action.value.lower()}:default")

    def _execute_msi(
        self,
        context: DeploymentContext,
        action: MsiAction,
        path: str,
        parameters: Optional[str] = None,
        transform: Optional[str] = None,
        component: Optional[str] = None
    ) -> int:
        """Run an MSI action and interpret its exit code.

        Raises:
            InstallerError: If Windows Installer reports a failure
        """
        self.logger.info(f"{action.value}: {path}")
        exit_code = self.toolkit.execute_msi(action, path, parameters=parameters, transform=transform)

        if exit_code == 0:
            return exit_code

        if exit_code in MSI_REBOOT_CODES:
            self.logger.warning(f"{action.value} of {path} requires a reboot (exit code {exit_code})")
            context.reboot_required = True
            return exit_code

        if action == MsiAction.UNINSTALL and exit_code == MSI_PRODUCT_NOT_INSTALLED:
            self.logger.warning(f"{component or path} is not installed, nothing to remove")
            return exit_code

        raise InstallerError(
            f"{action.value} failed: {error_handler.describe_msi_exit_code(exit_code)}",
            exit_code=exit_code,
            context=ErrorContext(
                module=component,
                operation=action.value,
                package_path=path,
                install_phase=context.install_phase
            )
        )

    def _component_path(self, component: str) -> str:
        filename = self.config.package_file(component)
        if not filename:
            raise ConfigurationError(
                f"No package file configured for {component}",
                context=ErrorContext(module=component, operation="resolve_package"),
                suggestions=[f"Add '{component}' under package.module_packages in deploy.yaml"]
            )
        return self._package_file(filename)

    def _package_file(self, filename: str) -> str:
        return str(Path(self.toolkit.session.package_root) / self.package.files_dir / filename)

    @staticmethod
    def _target_path(directory: str, filename: str) -> str:
        return str(PureWindowsPath(directory) / filename)

    def _report_failure(self, message: str) -> None:
        self.logger.error(message)
        try:
            self.toolkit.write_log(message, severity=LogSeverity.ERROR, source=LOG_SOURCE)
            self.toolkit.show_dialog_box(message, icon="Stop")
        except Exception:
            self.logger.exception("Could not report the failure through the toolkit")
