"""Cycle-safe transitive closure ("deep expansion") over a parsed lockfile.

Given the flat package list produced by a lockfile parser, ``expand()``
computes every package name reachable from one root by following declared
dependency edges. Real lockfiles are full of cycles (jest alone pulls in
hundreds of mutually referencing packages), so termination cannot depend on
the graph being a DAG.

Algorithm
---------
1. Seed the closure with the root's own declared edges.
2. Walk the closure's edge list in order. Before fetching an edge's
   children, record its name in a visited set; a name is never expanded
   twice, which is what guarantees termination.
3. Append each child whose name is not yet in the closure (first occurrence
   wins; later declared versions of the same name are dropped).
4. Stop when every edge has been visited, then sort by name.

The edge records themselves are immutable. "Processed" lives in the visited
set, never on shared data, so expansion is re-entrant.

Dependency names missing from the lockfile contribute no children. When a
lockfile resolves several versions of one name, intermediate nodes follow the
first resolved version in list order.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from pluginosv.core.lockfile.models import Dependency, PackageDetails
from pluginosv.exceptions import PackageNotFoundError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# DependencyState / PackageFlattened: closure data model
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DependencyState:
    """A closure edge plus its expansion marker.

    Attributes:
        package: The dependency edge.
        processed: True once this edge's own dependencies have been merged
            into the closure. Every edge of a finished closure is processed.
    """

    package: Dependency
    processed: bool = False


@dataclass(frozen=True)
class PackageFlattened:
    """The transitive closure computed for one root package.

    Attributes:
        name: Root package name.
        version: Root package version (first resolved version).
        dependencies: Closure edges, unique by name.
    """

    name: str
    version: str
    dependencies: tuple[DependencyState, ...] = ()
    _names: frozenset[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "_names", frozenset(d.package.name for d in self.dependencies)
        )

    @property
    def dependency_names(self) -> list[str]:
        """Return closure member names in stored order."""
        return [d.package.name for d in self.dependencies]

    def contains(self, name: str) -> bool:
        """Return True if *name* is part of this closure."""
        return name in self._names


# ---------------------------------------------------------------------------
# Lookup helpers
# ---------------------------------------------------------------------------


def index_packages(packages: Iterable[PackageDetails]) -> dict[str, PackageDetails]:
    """Map each name to its first resolved ``PackageDetails``."""
    index: dict[str, PackageDetails] = {}
    for package in packages:
        index.setdefault(package.name, package)
    return index


def lookup(name: str, packages: Iterable[PackageDetails]) -> PackageDetails | None:
    """Return the first package named *name*, or None.

    The returned record is the stored (frozen) entry itself.
    """
    for package in packages:
        if package.name == name:
            return package
    return None


def direct_dependencies(name: str, packages: list[PackageDetails]) -> PackageFlattened:
    """Return *name*'s own declared edges, each unprocessed.

    Raises:
        PackageNotFoundError: If *name* is not in *packages*.
    """
    package = lookup(name, packages)
    if package is None:
        raise PackageNotFoundError(name)
    return PackageFlattened(
        name=package.name,
        version=package.version,
        dependencies=tuple(DependencyState(package=d) for d in package.dependencies),
    )


def deduplicate(
    edges: list[DependencyState],
    seen: set[str],
    incoming: Iterable[Dependency],
) -> bool:
    """Append every incoming edge whose name is not already in *seen*.

    Args:
        edges: Closure edge list, extended in place.
        seen: Names already in *edges*, updated in place.
        incoming: Candidate edges.

    Returns:
        True if at least one edge was added.
    """
    added = False
    for dependency in incoming:
        if dependency.name in seen:
            continue
        seen.add(dependency.name)
        edges.append(DependencyState(package=dependency))
        added = True
    return added


def deep_expand(
    edges: list[DependencyState],
    index: dict[str, PackageDetails],
) -> list[DependencyState]:
    """Grow *edges* to the full transitive closure.

    Args:
        edges: Seed edges. Not modified; repeated names keep the first.
        index: Name to first resolved package, see ``index_packages``.

    Returns:
        The closure in discovery order, every edge marked processed.
    """
    closure: list[DependencyState] = []
    seen: set[str] = set()
    deduplicate(closure, seen, (state.package for state in edges))
    visited: set[str] = set()

    position = 0
    while position < len(closure):
        name = closure[position].package.name
        position += 1
        if name in visited:
            continue
        visited.add(name)
        package = index.get(name)
        if package is not None:
            deduplicate(closure, seen, package.dependencies)

    return [DependencyState(package=state.package, processed=True) for state in closure]


def expand(
    name: str,
    packages: list[PackageDetails],
    *,
    all_versions: bool = False,
) -> PackageFlattened:
    """Compute the cycle-safe transitive closure of *name*.

    Args:
        name: Root package name.
        packages: Parsed lockfile packages.
        all_versions: Seed the closure with the edges of every resolved
            version of *name* instead of only the first.

    Returns:
        The closure, sorted by dependency name.

    Raises:
        PackageNotFoundError: If *name* is not in *packages*.
    """
    root = direct_dependencies(name, packages)

    seeds: list[DependencyState] = []
    seen: set[str] = set()
    deduplicate(seeds, seen, (state.package for state in root.dependencies))
    if all_versions:
        for package in packages:
            if package.name == name:
                deduplicate(seeds, seen, package.dependencies)

    closure = deep_expand(seeds, index_packages(packages))
    closure.sort(key=lambda state: state.package.name)
    logger.debug("Expanded %s to %d transitive dependencies", name, len(closure))

    return PackageFlattened(
        name=root.name,
        version=root.version,
        dependencies=tuple(closure),
    )
