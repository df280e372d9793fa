# -*- coding: utf-8 -*-
"""
Tests for module ordering.
"""

from anyconnect_deploy.config.models import DART, Module
from anyconnect_deploy.orchestrator.steps import (
    INSTALL_ORDER,
    select_install_modules,
    select_uninstall_components,
    unpackaged_selection,
)


class TestInstallSelection:
    """Tests for select_install_modules."""

    def test_all_selects_every_packaged_module(self):
        assert select_install_modules({Module.ALL}) == list(INSTALL_ORDER)

    def test_order_is_fixed_regardless_of_request_order(self):
        selection = [Module.ISE, Module.NAM, Module.BASE]
        assert select_install_modules(selection) == [Module.BASE, Module.NAM, Module.ISE]

    def test_default_selection(self):
        assert select_install_modules({Module.BASE, Module.GINA}) == [Module.BASE, Module.GINA]

    def test_wsm_has_no_install_step(self):
        assert select_install_modules({Module.WSM}) == []
        assert unpackaged_selection({Module.WSM, Module.BASE}) == [Module.WSM]


class TestUninstallSelection:
    """Tests for select_uninstall_components."""

    def test_base_removes_everything_in_reverse_dependency_order(self):
        assert select_uninstall_components({Module.BASE}) == [
            "GINA", "NAM", "Posture", "ISE", "Base", DART
        ]

    def test_all_matches_base(self):
        assert select_uninstall_components({Module.ALL}) == select_uninstall_components({Module.BASE})

    def test_subset_without_base_keeps_fixed_order(self):
        assert select_uninstall_components({Module.ISE, Module.GINA, Module.NAM}) == [
            "GINA", "NAM", "ISE"
        ]
