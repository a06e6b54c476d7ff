"""Parser for ``pnpm-lock.yaml`` files.

pnpm writes YAML. Three schema generations matter here:

.. code-block:: yaml

    # v5: lockfileVersion is a number, version after a slash
    lockfileVersion: 5.4
    packages:
      /@babel/core/7.21.0_supports-color@8.1.1:
        dependencies: {...}

    # v6: lockfileVersion is a string, "@" before the version
    lockfileVersion: '6.0'
    packages:
      /@babel/core@7.21.0(supports-color@8.1.1):
        dependencies: {...}

    # v9: no leading slash, edges moved to a separate snapshots section
    lockfileVersion: '9.0'
    packages:
      '@babel/core@7.21.0': {...}
    snapshots:
      '@babel/core@7.21.0':
        dependencies: {...}

Package identity usually lives only in the key, so name and version are
recovered positionally when the entry has no explicit ``name``/``version``.
Entries where neither source yields both are skipped, never fatal.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from pluginosv.core.lockfile.commit import CODELOAD_TARBALL_PATTERN
from pluginosv.core.lockfile.models import Dependency, Ecosystem, PackageDetails
from pluginosv.core.lockfile.regex import cached_compile
from pluginosv.exceptions import LockfileDecodeError, LockfileReadError

logger = logging.getLogger(__name__)

_STARTS_WITH_NUMBER = r"^\d"
_NAME_AT_VERSION = r"^(.+)@(\d[\w.+-]*)$"
_PEER_SUFFIX = r"\(.*\)$"


# ---------------------------------------------------------------------------
# Lockfile version adapter
# ---------------------------------------------------------------------------


def normalize_lockfile_version(value: Any) -> float:
    """Decode ``lockfileVersion`` whether it was written as number or string.

    pnpm v5 writes ``5.4``; v6 and later write ``'6.0'``. Both normalize to
    a float. A missing value normalizes to ``0.0``.

    Raises:
        ValueError: If the value is present but not numeric.
    """
    if value is None:
        return 0.0
    if isinstance(value, bool):
        raise ValueError(f"invalid lockfileVersion: {value!r}")
    if isinstance(value, (int, float)):
        return float(value)
    return float(str(value).strip())


@dataclass(frozen=True)
class PnpmLockfile:
    """The parts of a pnpm lockfile the parser reads."""

    version: float
    packages: dict[str, Any] = field(default_factory=dict)
    snapshots: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_document(cls, data: Any, path: str = "<memory>") -> PnpmLockfile:
        """Build from a decoded YAML document.

        Raises:
            LockfileDecodeError: If the document is not a mapping or the
                lockfile version cannot be read as a number.
        """
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise LockfileDecodeError(path, "could not parse")
        try:
            version = normalize_lockfile_version(data.get("lockfileVersion"))
        except ValueError as exc:
            raise LockfileDecodeError(path, "could not parse lockfileVersion") from exc

        packages = data.get("packages")
        snapshots = data.get("snapshots")
        return cls(
            version=version,
            packages=packages if isinstance(packages, dict) else {},
            snapshots=snapshots if isinstance(snapshots, dict) else {},
        )


# ---------------------------------------------------------------------------
# Dependency-path decoding
# ---------------------------------------------------------------------------


def _starts_with_number(value: str) -> bool:
    return cached_compile(_STARTS_WITH_NUMBER).match(value) is not None


def parse_name_at_version(value: str) -> tuple[str, str]:
    """Split ``name@version``, where *name* may itself contain ``@``.

    Returns:
        ``(name, version)``, or ``(value, "")`` when no version is found.
    """
    value = cached_compile(_PEER_SUFFIX).sub("", value)
    matched = cached_compile(_NAME_AT_VERSION).match(value)
    if matched is None:
        return value, ""
    return matched.group(1), matched.group(2)


def extract_name_and_version(dependency_path: str) -> tuple[str, str]:
    """Recover ``(name, version)`` from a pnpm dependency path.

    ``/@scope/name/1.2.3_peer@1.0.0`` and ``/@scope/name@1.2.3(peer@1.0.0)``
    both yield ``("@scope/name", "1.2.3")``.

    Returns:
        ``("", "")`` when no plausible identity can be recovered.
    """
    # file: dependencies always carry an explicit name and never a version
    if dependency_path.startswith("file:"):
        return "", ""

    # v6+ peer suffixes may themselves contain "/" (e.g. "(@types/react@18.0.0)")
    dependency_path = dependency_path.split("(", 1)[0]

    parts = dependency_path.removeprefix("/").split("/")
    if not parts or not parts[0]:
        return "", ""

    if parts[0].startswith("@"):
        name = "/".join(parts[:2])
        rest = parts[2:]
    else:
        name = parts[0]
        rest = parts[1:]

    version = rest[0] if rest else ""
    if not version:
        name, version = parse_name_at_version(name)

    if not version or not _starts_with_number(version):
        return "", ""

    version = version.split("_", 1)[0]
    return name, version


def _extract_commit(resolution: Any) -> str:
    if not isinstance(resolution, dict):
        return ""
    commit = str(resolution.get("commit") or "")
    tarball = str(resolution.get("tarball") or "")
    if tarball.startswith("https://codeload.github.com"):
        matched = cached_compile(CODELOAD_TARBALL_PATTERN).search(tarball)
        if matched is not None:
            commit = matched.group(1)
    return commit


def _edges(entry: dict[str, Any]) -> list[Dependency]:
    mapping = entry.get("dependencies")
    if not isinstance(mapping, dict):
        return []
    return [
        Dependency(name=str(name), version=str(version))
        for name, version in mapping.items()
    ]


def _index_snapshots(snapshots: dict[str, Any]) -> dict[str, list[Dependency]]:
    """Group v9 snapshot edges by package key, ignoring peer suffixes."""
    index: dict[str, list[Dependency]] = {}
    for key, snapshot in snapshots.items():
        if not isinstance(snapshot, dict):
            continue
        index.setdefault(str(key).split("(", 1)[0], []).extend(_edges(snapshot))
    return index


def parse_pnpm_lockfile(lockfile: PnpmLockfile) -> list[PackageDetails]:
    """Convert a decoded pnpm lockfile into packages.

    Returns:
        Packages sorted by name, then version.
    """
    packages: list[PackageDetails] = []
    snapshot_edges = _index_snapshots(lockfile.snapshots)

    for key, entry in lockfile.packages.items():
        key = str(key)
        if entry is None:
            entry = {}
        if not isinstance(entry, dict):
            logger.debug("Skipping malformed pnpm entry %r", key)
            continue

        name, version = extract_name_and_version(key)

        # Explicit fields are only written when the key lacks them and
        # take priority over anything recovered from the key
        if entry.get("name"):
            name = str(entry["name"])
        if entry.get("version"):
            version = str(entry["version"])

        if not name or not version:
            logger.debug("Skipping pnpm entry without identity %r", key)
            continue

        edges = _edges(entry)
        known = {edge.name for edge in edges}
        for edge in snapshot_edges.get(key, ()):
            if edge.name not in known:
                known.add(edge.name)
                edges.append(edge)

        packages.append(
            PackageDetails(
                name=name,
                version=version,
                ecosystem=Ecosystem.NPM,
                compare_as=Ecosystem.NPM,
                commit=_extract_commit(entry.get("resolution")),
                dependencies=tuple(edges),
            )
        )

    packages.sort(key=lambda p: (p.name, p.version))
    return packages


def parse_pnpm_lock(path: str | Path) -> list[PackageDetails]:
    """Parse a ``pnpm-lock.yaml`` file.

    Args:
        path: Filesystem path to the lockfile.

    Returns:
        List of resolved packages, sorted by name then version.

    Raises:
        LockfileReadError: If the file cannot be read.
        LockfileDecodeError: If the YAML or its top-level shape is invalid.
    """
    try:
        raw = Path(path).read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise LockfileDecodeError(str(path), "could not decode") from exc
    except OSError as exc:
        raise LockfileReadError(str(path), "could not read") from exc

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise LockfileDecodeError(str(path), "could not parse") from exc

    return parse_pnpm_lockfile(PnpmLockfile.from_document(data, str(path)))
