"""pluginosv exception hierarchy.

All public exceptions inherit from PluginOSVError, giving callers a single
base class to catch when they want to handle any pluginosv-specific failure
without swallowing unrelated errors.

A malformed *record* inside an otherwise valid lockfile is never an
exception: parsers skip it and carry on.
"""

from __future__ import annotations


class PluginOSVError(Exception):
    """Base exception for all pluginosv errors."""


class LockfileError(PluginOSVError):
    """Raised when a lockfile cannot be turned into a package list.

    Carries the offending path so fail-open callers can log it.
    """

    def __init__(self, path: str, message: str) -> None:
        super().__init__(f"{message}: {path}")
        self.path = path


class LockfileReadError(LockfileError):
    """Raised when the lockfile cannot be opened or read."""


class LockfileDecodeError(LockfileError):
    """Raised when the top-level JSON/YAML structure is malformed.

    Covers syntax errors, a non-mapping document, and an unparseable
    ``lockfileVersion``.
    """


class UnsupportedLockfileError(LockfileError):
    """Raised when no parser is registered for the lockfile's base name."""


class PackageNotFoundError(PluginOSVError, LookupError):
    """Raised when a package name is absent from the parsed package list."""

    def __init__(self, name: str) -> None:
        super().__init__(f"package not found: {name}")
        self.name = name


class ConfigError(PluginOSVError):
    """Raised when a configuration file is malformed."""
