"""Project root value shared by every component."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

DIST_DIR_NAME = "dist"
MANIFEST_FILENAME = "package.json"
CONFIG_SEARCH_SUBDIRS = ("build", "config")


@dataclass(frozen=True)
class ProjectRoot:
    """Resolved root directory of the project being rebuilt."""

    path: Path

    @classmethod
    def from_value(cls, value: str | Path | None) -> "ProjectRoot":
        if value is None:
            return cls(Path.cwd().resolve())
        return cls(Path(value).expanduser().resolve())

    @property
    def dist_dir(self) -> Path:
        return self.path / DIST_DIR_NAME

    @property
    def manifest_path(self) -> Path:
        return self.path / MANIFEST_FILENAME

    @property
    def config_search_paths(self) -> tuple[Path, ...]:
        return (self.path, *(self.path / name for name in CONFIG_SEARCH_SUBDIRS))
