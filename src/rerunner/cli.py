"""CLI entrypoint for rerunner."""

from __future__ import annotations

import argparse
import logging
import platform
import sys
from collections.abc import Sequence
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as package_version

from rerunner.config import (
    CONFIG_FILENAME,
    PackageJsonResolver,
    RerunnerConfig,
    RerunnerFileResolver,
    TargetResolver,
    write_config,
)
from rerunner.errors import ConfigNotFoundError, RerunnerError
from rerunner.gate import GateAction, run_gate
from rerunner.logging_setup import configure_logging
from rerunner.project import ProjectRoot
from rerunner.terminal import green
from rerunner.workflow import Orchestrator

LOGGER = logging.getLogger(__name__)


def _resolve_app_version() -> str:
    try:
        return package_version("rerunner")
    except PackageNotFoundError:
        return "0.0.0.dev0"


def _is_supported_platform() -> bool:
    return platform.system() == "Darwin"


def _is_interactive_session() -> bool:
    stdin_isatty = getattr(sys.stdin, "isatty", None)
    stdout_isatty = getattr(sys.stdout, "isatty", None)
    return bool(callable(stdin_isatty) and stdin_isatty() and callable(stdout_isatty) and stdout_isatty())


def _resolver_for(args: argparse.Namespace) -> TargetResolver:
    if args.from_package_json:
        return PackageJsonResolver()
    return RerunnerFileResolver()


def _print_missing_config_guidance() -> None:
    print(f"{CONFIG_FILENAME} config file not found, use init to create one.")
    print("Run: rerunner init")
    print("  OR")
    print("Run: npx rerunner init")


def cmd_run(args: argparse.Namespace) -> int:
    project = ProjectRoot.from_value(args.root)
    orchestrator = Orchestrator(project, _resolver_for(args))

    try:
        target = orchestrator.resolve_target()
        configure_logging(target.log_level)
        state = orchestrator.gather_state()
    except ConfigNotFoundError:
        _print_missing_config_guidance()
        return 0
    except RerunnerError as exc:
        LOGGER.error("Error during initialization: %s", exc)
        return 1

    if not _is_interactive_session():
        print("`rerunner` requires an interactive terminal.", file=sys.stderr)
        return 1

    if run_gate(state) is GateAction.QUIT:
        return 0

    try:
        orchestrator.execute(state)
    except RerunnerError as exc:
        LOGGER.error("Error during reinstall: %s", exc)
        return 1
    return 0


def cmd_init(args: argparse.Namespace) -> int:
    project = ProjectRoot.from_value(args.root)
    config_path = project.path / CONFIG_FILENAME

    print(f"Creating {CONFIG_FILENAME} configuration file...\n")
    try:
        app_name = input("Enter the app name: ").strip()
    except (EOFError, KeyboardInterrupt):
        print("\nCancelled.")
        return 130

    if not app_name:
        print("App name is required", file=sys.stderr)
        return 1

    try:
        write_config(config_path, RerunnerConfig(app_name=app_name))
    except OSError as exc:
        print(f"Failed to create config file: {exc}", file=sys.stderr)
        return 1

    print(green(f"✓ Created {config_path}"))
    print(f"App name: {app_name}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rerunner",
        description="Rebuild, reinstall and relaunch a macOS app from its disk image",
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {_resolve_app_version()}",
    )
    parser.add_argument(
        "--root",
        default=None,
        help="Project root containing package.json (default: current directory)",
    )
    parser.add_argument(
        "--from-package-json",
        action="store_true",
        help="Take the app name from package.json productName instead of .rerunner.json",
    )
    parser.set_defaults(func=cmd_run)

    subparsers = parser.add_subparsers(dest="command")
    init_parser = subparsers.add_parser("init", help=f"Create {CONFIG_FILENAME}")
    init_parser.set_defaults(func=cmd_init)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    if not _is_supported_platform():
        print("Error: rerunner only works on macOS", file=sys.stderr)
        return 1

    configure_logging("INFO")
    parser = build_parser()
    args = parser.parse_args(argv)
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
