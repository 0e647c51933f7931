"""Reinstall workflow: initial state gathering and the confirmed plan."""

from __future__ import annotations

import logging
import platform
import sys
from dataclasses import dataclass
from pathlib import Path

from rerunner.build import format_command, run_build
from rerunner.config import AppTarget, TargetResolver
from rerunner.errors import InstallError
from rerunner.installer import install_from_disk_image
from rerunner.launcher import launch_application
from rerunner.locator import locate_installer
from rerunner.manifest import read_manifest_version
from rerunner.probe import (
    DEFAULT_APPLICATIONS_DIR,
    file_age_seconds,
    is_application_installed,
    is_process_running,
)
from rerunner.process_control import terminate_application
from rerunner.project import ProjectRoot
from rerunner.terminal import green

LOGGER = logging.getLogger(__name__)


@dataclass
class WorkflowState:
    """What rerunner observed at startup plus the user's selections."""

    app_name: str
    installer_path: Path
    installer_exists: bool
    installer_age_seconds: int | None
    app_running: bool
    app_installed: bool
    rebuild_selected: bool = True
    launch_after_install_selected: bool = True

    def __post_init__(self) -> None:
        if not self.installer_exists:
            self.rebuild_selected = True

    @property
    def build_required(self) -> bool:
        return not self.installer_exists

    def toggle_build(self) -> bool:
        """Flip the build selection; returns False when building is mandatory."""
        if self.build_required:
            return False
        self.rebuild_selected = not self.rebuild_selected
        return True

    def toggle_launch(self) -> None:
        self.launch_after_install_selected = not self.launch_after_install_selected


class Orchestrator:
    """Ties the probe, locator, builder, installer and launcher together.

    The application identity and build command come from *resolver*, so the
    same workflow serves every configuration source.
    """

    def __init__(
        self,
        project: ProjectRoot,
        resolver: TargetResolver,
        *,
        applications_dir: Path = DEFAULT_APPLICATIONS_DIR,
        platform_name: str | None = None,
        machine: str | None = None,
    ) -> None:
        self.project = project
        self._resolver = resolver
        self._applications_dir = applications_dir
        self._platform_name = platform_name or sys.platform
        self._machine = machine or platform.machine()
        self.target: AppTarget | None = None

    def resolve_target(self) -> AppTarget:
        if self.target is None:
            self.target = self._resolver.resolve(self.project)
        return self.target

    def gather_state(self) -> WorkflowState:
        """Probe the host once; selections start enabled."""
        target = self.resolve_target()
        version = read_manifest_version(self.project)
        installer_path = locate_installer(
            self.project.dist_dir,
            target.app_name,
            version,
            self._platform_name,
            self._machine,
        )
        installer_age = file_age_seconds(installer_path)
        state = WorkflowState(
            app_name=target.app_name,
            installer_path=installer_path,
            installer_exists=installer_age is not None,
            installer_age_seconds=installer_age,
            app_running=is_process_running(target.app_name),
            app_installed=is_application_installed(target.app_name, self._applications_dir),
        )
        LOGGER.debug("Initial state: %s", state)
        return state

    def execute(self, state: WorkflowState) -> None:
        """Run the confirmed plan in order, stopping at the first failure.

        When launching is selected this does not return.
        """
        target = self.resolve_target()
        print("Starting reinstall process...\n")

        if state.rebuild_selected:
            print(f"Running {format_command(target.build_command)}...")
            run_build(target.build_command, cwd=self.project.path)
            print(green("✓ Build complete") + "\n")

        if not state.installer_path.exists():
            raise InstallError(
                f"Installer not found: {state.installer_path}. Did the build succeed?"
            )

        # Uses the startup probe; a process started since then is not detected.
        if state.app_running:
            print("Killing running app...")
            terminate_application(state.app_name)
            print(green("✓ App killed") + "\n")

        print("Installing from disk image...")
        install_from_disk_image(
            state.installer_path,
            state.app_name,
            applications_dir=self._applications_dir,
        )
        print(green("✓ App installed") + "\n")

        if state.launch_after_install_selected:
            print("Running app...")
            launch_application(state.app_name, applications_dir=self._applications_dir)

        print("Reinstall complete!")
