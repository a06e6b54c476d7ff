"""Read-only views over osv-scanner JSON results.

The scan result is an opaque document produced by an external scanner::

    {"results": [
        {"source": {"path": ".../yarn.lock", "type": "lockfile"},
         "packages": [
            {"package": {"name": "moment", "version": "2.29.1", "ecosystem": "npm"},
             "vulnerabilities": [...],
             "groups": [...]}]}]}

Only package identity is read here. Everything else is carried through by
reference, untouched.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Any


class Severity(str, Enum):
    """Severity labels written by osv-scanner in ``database_specific``."""

    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    MODERATE = "MODERATE"
    LOW = "LOW"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def parse(cls, value: Any) -> Severity:
        """Map a raw label to a member, ``UNKNOWN`` when unrecognised."""
        try:
            return cls(str(value).upper())
        except ValueError:
            return cls.UNKNOWN


@dataclass(frozen=True)
class PackageRef:
    """Identity of one reported package."""

    name: str
    version: str
    ecosystem: str = ""

    @classmethod
    def from_entry(cls, entry: Any) -> PackageRef | None:
        """Read identity from a ``packages[]`` entry, None if it has none."""
        if not isinstance(entry, dict):
            return None
        package = entry.get("package")
        if not isinstance(package, dict) or not package.get("name"):
            return None
        return cls(
            name=str(package["name"]),
            version=str(package.get("version") or ""),
            ecosystem=str(package.get("ecosystem") or ""),
        )


def result_sources(results: Any) -> list[dict[str, Any]]:
    """Return the ``results`` list of a scan document (empty if absent)."""
    if not isinstance(results, dict):
        return []
    sources = results.get("results")
    if not isinstance(sources, list):
        return []
    return [source for source in sources if isinstance(source, dict)]


def iter_package_entries(results: Any) -> Iterator[dict[str, Any]]:
    """Yield every ``packages[]`` entry across all sources."""
    for source in result_sources(results):
        packages = source.get("packages")
        if not isinstance(packages, list):
            continue
        for entry in packages:
            if isinstance(entry, dict):
                yield entry


def package_names(results: Any) -> list[str]:
    """Return reported package names in document order."""
    names: list[str] = []
    for entry in iter_package_entries(results):
        ref = PackageRef.from_entry(entry)
        if ref is not None:
            names.append(ref.name)
    return names
