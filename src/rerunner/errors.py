"""Error types raised by rerunner components."""

from __future__ import annotations


class RerunnerError(RuntimeError):
    """Base class for failures that end a rerunner run."""


class ConfigError(RerunnerError):
    """Raised when the configuration file is unreadable or invalid."""


class ConfigNotFoundError(ConfigError):
    """Raised when no configuration file exists in any search location."""


class ManifestError(RerunnerError):
    """Raised when the project manifest cannot provide a version."""


class BuildError(RerunnerError):
    """Raised when the external build command fails."""


class MountError(RerunnerError):
    """Raised when a disk image cannot be attached or detached."""


class InstallError(RerunnerError):
    """Raised when the application cannot be installed."""


class LaunchError(RerunnerError):
    """Raised when the installed application cannot be started."""
