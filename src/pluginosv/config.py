"""Filter configuration: trusted roots, suppressions, bypassed manifests.

Defaults are static and cover the validator's normal run. A YAML file can
override them for local triage:

.. code-block:: yaml

    extra_trusted_packages:
      - "@grafana/scenes"
    suppressed:
      - "semver@5.7.1"
    bypass_files:
      - go.mod
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from pluginosv.core.trust.cache import TRUSTED_PACKAGES
from pluginosv.exceptions import ConfigError

# Individual findings (``name@version``) that are always dropped, whatever
# pulls them in.
SUPPRESSED_FINDINGS: frozenset[str] = frozenset()

# Manifests handed to the filter that are not JavaScript lockfiles.
DEFAULT_BYPASS_FILES: frozenset[str] = frozenset({"go.mod"})

_KNOWN_KEYS = frozenset({
    "trusted_packages",
    "extra_trusted_packages",
    "suppressed",
    "bypass_files",
})


@dataclass(frozen=True)
class FilterConfig:
    """Settings for one filtering run.

    Attributes:
        trusted_packages: Root package names whose transitive dependencies
            are attributed away from the plugin author.
        suppressed: ``name@version`` findings that are always dropped.
        bypass_files: Lockfile base names passed through unfiltered.
    """

    trusted_packages: frozenset[str] = TRUSTED_PACKAGES
    suppressed: frozenset[str] = SUPPRESSED_FINDINGS
    bypass_files: frozenset[str] = DEFAULT_BYPASS_FILES

    def is_suppressed(self, name: str, version: str) -> bool:
        """Return True if ``name@version`` is on the suppression list."""
        return f"{name}@{version}" in self.suppressed


def _string_set(data: dict[str, Any], key: str) -> frozenset[str] | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"{key!r} must be a list of strings")
    return frozenset(value)


def config_from_dict(data: dict[str, Any]) -> FilterConfig:
    """Build a ``FilterConfig`` from a decoded mapping.

    Raises:
        ConfigError: On unknown keys or values of the wrong type.
    """
    unknown = set(data) - _KNOWN_KEYS
    if unknown:
        raise ConfigError(f"unknown configuration keys: {sorted(unknown)}")

    trusted = _string_set(data, "trusted_packages")
    extra = _string_set(data, "extra_trusted_packages")
    suppressed = _string_set(data, "suppressed")
    bypass = _string_set(data, "bypass_files")

    return FilterConfig(
        trusted_packages=(trusted if trusted is not None else TRUSTED_PACKAGES)
        | (extra or frozenset()),
        suppressed=suppressed if suppressed is not None else SUPPRESSED_FINDINGS,
        bypass_files=bypass if bypass is not None else DEFAULT_BYPASS_FILES,
    )


def load_config(path: Path) -> FilterConfig:
    """Read a YAML configuration file.

    An empty file yields the defaults.

    Raises:
        ConfigError: If the file cannot be read, is not valid YAML, or does
            not describe a valid configuration.
    """
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"could not load configuration {path}: {exc}") from exc

    if data is None:
        return FilterConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"configuration {path} must be a mapping")
    return config_from_dict(data)
