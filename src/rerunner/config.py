"""Configuration loading, validation and target resolution."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

from pydantic import BaseModel, Field, ValidationError

from rerunner.errors import ConfigError, ConfigNotFoundError, ManifestError
from rerunner.manifest import read_manifest
from rerunner.project import ProjectRoot

LOGGER = logging.getLogger(__name__)

CONFIG_FILENAME = ".rerunner.json"
DEFAULT_BUILD_COMMAND = ("yarn", "dev-rebuild")
MANIFEST_BUILD_COMMAND = ("yarn", "rebuild")


class RerunnerConfig(BaseModel):
    """Contents of `.rerunner.json`."""

    model_config = {"populate_by_name": True}

    app_name: str = Field(alias="appName")
    build_command: list[str] = Field(
        default_factory=lambda: list(DEFAULT_BUILD_COMMAND),
        alias="buildCommand",
    )
    log_level: str = Field(default="INFO", alias="logLevel")


@dataclass(frozen=True)
class AppTarget:
    """Application identity plus the command that rebuilds its installer."""

    app_name: str
    build_command: tuple[str, ...]
    log_level: str = "INFO"


class TargetResolver(Protocol):
    """Resolves which application a project builds and how to build it."""

    def resolve(self, project: ProjectRoot) -> AppTarget:
        """Return the application target for *project*."""


def find_config_file(project: ProjectRoot) -> Path | None:
    """Return the first `.rerunner.json` found in the project search paths."""
    for search_dir in project.config_search_paths:
        candidate = search_dir / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def _validate(raw: Any, *, path: Path) -> RerunnerConfig:
    if not isinstance(raw, dict):
        raise ConfigError(f"{path}: expected a JSON object")
    try:
        config = RerunnerConfig.model_validate(raw)
    except ValidationError as exc:
        raise ConfigError(f"failed to load {path}:\n{exc}") from exc

    config.app_name = config.app_name.strip()
    if not config.app_name:
        raise ConfigError(f"appName missing or empty in {path}")
    if not config.build_command or not all(part.strip() for part in config.build_command):
        raise ConfigError(f"buildCommand must be a non-empty list of arguments in {path}")
    return config


def load_config(path: Path) -> RerunnerConfig:
    """Load and validate a configuration file."""
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f"failed to load {path}:\n{exc}") from exc
    return _validate(raw, path=path)


def write_config(path: Path, config: RerunnerConfig) -> None:
    """Write a configuration file containing only the fields that were set."""
    payload = config.model_dump(by_alias=True, exclude_unset=True)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")


class RerunnerFileResolver:
    """Resolves the target from `.rerunner.json`."""

    def resolve(self, project: ProjectRoot) -> AppTarget:
        config_path = find_config_file(project)
        if config_path is None:
            raise ConfigNotFoundError(
                f"Config file {CONFIG_FILENAME} not found. Run 'rerunner init' to create one."
            )
        LOGGER.debug("Using config file %s", config_path)
        config = load_config(config_path)
        return AppTarget(
            app_name=config.app_name,
            build_command=tuple(config.build_command),
            log_level=config.log_level,
        )


class PackageJsonResolver:
    """Resolves the target from the `productName` field of `package.json`."""

    def __init__(self, build_command: tuple[str, ...] = MANIFEST_BUILD_COMMAND) -> None:
        self._build_command = build_command

    def resolve(self, project: ProjectRoot) -> AppTarget:
        try:
            manifest = read_manifest(project)
        except ManifestError as exc:
            raise ConfigError(str(exc)) from exc

        name = manifest.get("productName")
        if name is None:
            build_section = manifest.get("build")
            if isinstance(build_section, dict):
                name = build_section.get("productName")
        if not isinstance(name, str) or not name.strip():
            raise ConfigError(f"productName missing or empty in {project.manifest_path}")
        return AppTarget(app_name=name.strip(), build_command=self._build_command)
