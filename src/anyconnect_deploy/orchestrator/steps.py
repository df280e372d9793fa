"""Fixed module ordering for install and uninstall."""

from typing import Iterable, List

from anyconnect_deploy.config.models import DART, Module

# Core first, then the modules that depend on it
INSTALL_ORDER = (Module.BASE, Module.GINA, Module.NAM, Module.POSTURE, Module.ISE)

# Dependents first, core client last
UNINSTALL_ORDER = (Module.GINA, Module.NAM, Module.POSTURE, Module.ISE, Module.BASE)

# Selectable, but the package ships no installer for it
UNPACKAGED_MODULES = frozenset({Module.WSM})


def select_install_modules(selection: Iterable[Module]) -> List[Module]:
    """Modules to install, in install order."""
    selected = set(selection)
    if Module.ALL in selected:
        return list(INSTALL_ORDER)
    return [module for module in INSTALL_ORDER if module in selected]


def select_uninstall_components(selection: Iterable[Module]) -> List[str]:
    """Components to remove, in uninstall order.

    Removing the core client takes every dependent module and DART with it.
    """
    selected = set(selection)
    if Module.ALL in selected or Module.BASE in selected:
        return [module.value for module in UNINSTALL_ORDER] + [DART]
    return [module.value for module in UNINSTALL_ORDER if module in selected]


def unpackaged_selection(selection: Iterable[Module]) -> List[Module]:
    """Explicitly requested modules that have no package step."""
    return sorted(UNPACKAGED_MODULES.intersection(selection), key=lambda m: m.value)
