"""Parser for ``package-lock.json`` and ``npm-shrinkwrap.json``.

npm has written two lockfile shapes:

- **lockfileVersion 2/3** -- a flat ``packages`` mapping keyed by the
  install path (``node_modules/@scope/name``, or nested
  ``node_modules/a/node_modules/b``). The package name is recovered from the
  last one or two path segments.
- **lockfileVersion 1** -- a nested ``dependencies`` tree, where a package
  that could not be hoisted lives under its parent. The tree is flattened
  recursively so nested packages at any depth land in one result set.

v2 files carry both shapes; ``packages`` wins when present.
"""

from __future__ import annotations

import json
import logging
import posixpath
from pathlib import Path
from typing import Any

from pluginosv.core.lockfile.commit import try_extract_commit
from pluginosv.core.lockfile.models import Dependency, Ecosystem, PackageDetails
from pluginosv.exceptions import LockfileDecodeError, LockfileReadError

logger = logging.getLogger(__name__)


def extract_package_name(install_path: str) -> str:
    """Recover a package name from a ``node_modules`` install path.

    ``node_modules/@grafana/data`` yields ``@grafana/data``;
    ``node_modules/a/node_modules/b`` yields ``b``.
    """
    maybe_scope = posixpath.basename(posixpath.dirname(install_path))
    name = posixpath.basename(install_path)
    if maybe_scope.startswith("@"):
        name = f"{maybe_scope}/{name}"
    return name


def _string_edges(mapping: Any) -> tuple[Dependency, ...]:
    if not isinstance(mapping, dict):
        return ()
    return tuple(
        Dependency(name=name, version=str(version))
        for name, version in mapping.items()
    )


def parse_packages_section(packages: dict[str, Any]) -> dict[str, PackageDetails]:
    """Parse the v2/v3 ``packages`` mapping.

    Args:
        packages: The ``packages`` object of the lockfile.

    Returns:
        Mapping of identity key (``name@version`` or ``name@commit``) to
        package. Later duplicates of the same identity replace earlier ones.
    """
    details: dict[str, PackageDetails] = {}

    for install_path, entry in packages.items():
        if install_path == "":
            continue
        if not isinstance(entry, dict):
            logger.debug("Skipping malformed package-lock entry %r", install_path)
            continue

        name = extract_package_name(install_path)
        version = str(entry.get("version", ""))
        commit = try_extract_commit(str(entry.get("resolved", "")))

        # Commit-pinned packages dedup on the commit rather than the version
        package = PackageDetails(
            name=name,
            version=version,
            ecosystem=Ecosystem.NPM,
            compare_as=Ecosystem.NPM,
            commit=commit,
            dependencies=_string_edges(entry.get("dependencies")),
        )
        details[package.identity] = package

    return details


def parse_dependencies_section(
    dependencies: dict[str, Any],
) -> dict[str, PackageDetails]:
    """Flatten the v1 nested ``dependencies`` tree.

    Edges come from each entry's ``requires`` map; entries without one
    fall back to their nested packages.

    Args:
        dependencies: The ``dependencies`` object (at any depth).

    Returns:
        Mapping of identity key to package, including nested packages.
    """
    details: dict[str, PackageDetails] = {}

    for name, entry in dependencies.items():
        if not isinstance(entry, dict):
            logger.debug("Skipping malformed package-lock entry %r", name)
            continue

        nested = entry.get("dependencies")
        if isinstance(nested, dict):
            details.update(parse_dependencies_section(nested))

        declared = str(entry.get("version", ""))
        version = declared
        commit = ""

        # A "file:" dependency has no resolvable version
        if declared.startswith("file:"):
            version = ""
        else:
            commit = try_extract_commit(declared)
            if commit:
                version = ""

        if "requires" in entry:
            edges = _string_edges(entry.get("requires"))
        elif isinstance(nested, dict):
            edges = tuple(
                Dependency(name=child, version=str(child_entry.get("version", "")))
                for child, child_entry in nested.items()
                if isinstance(child_entry, dict)
            )
        else:
            edges = ()

        package = PackageDetails(
            name=name,
            version=version,
            ecosystem=Ecosystem.NPM,
            compare_as=Ecosystem.NPM,
            commit=commit,
            dependencies=edges,
        )
        details[package.identity] = package

    return details


def parse_npm_lock_data(data: Any, path: str = "<memory>") -> list[PackageDetails]:
    """Parse an already-decoded npm lockfile document.

    Args:
        data: The decoded JSON document.
        path: Source path, used only in error messages.

    Returns:
        Packages sorted by name, then by identity key.

    Raises:
        LockfileDecodeError: If the document is not a JSON object.
    """
    if not isinstance(data, dict):
        raise LockfileDecodeError(path, "could not parse")

    packages = data.get("packages")
    if isinstance(packages, dict):
        details = parse_packages_section(packages)
    else:
        dependencies = data.get("dependencies")
        details = (
            parse_dependencies_section(dependencies)
            if isinstance(dependencies, dict)
            else {}
        )

    ordered = sorted(details, key=lambda key: (details[key].name, key))
    return [details[key] for key in ordered]


def parse_npm_lock(path: str | Path) -> list[PackageDetails]:
    """Parse a ``package-lock.json`` or ``npm-shrinkwrap.json`` file.

    Args:
        path: Filesystem path to the lockfile.

    Returns:
        List of resolved packages, sorted by name.

    Raises:
        LockfileReadError: If the file cannot be read.
        LockfileDecodeError: If the file is not valid JSON.
    """
    try:
        raw = Path(path).read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise LockfileDecodeError(str(path), "could not decode") from exc
    except OSError as exc:
        raise LockfileReadError(str(path), "could not read") from exc

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise LockfileDecodeError(str(path), "could not parse") from exc

    return parse_npm_lock_data(data, str(path))
