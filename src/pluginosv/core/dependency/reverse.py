"""Reverse dependency lookup ("why is this package installed?").

The forward closure answers "what does X pull in". Triage often needs the
opposite: every package that directly or transitively depends on a
vulnerable leaf, hierarchy collapsed, like ``yarn why`` without the tree.
"""

from __future__ import annotations

from collections import defaultdict, deque

from pluginosv.core.lockfile.models import PackageDetails


def reverse_index(packages: list[PackageDetails]) -> dict[str, set[str]]:
    """Map each dependency name to the names of packages that declare it."""
    dependents: dict[str, set[str]] = defaultdict(set)
    for package in packages:
        for dependency in package.dependencies:
            dependents[dependency.name].add(package.name)
    return dependents


def included_by(name: str, packages: list[PackageDetails]) -> set[str]:
    """Return every package that directly or transitively depends on *name*.

    Cycles are collapsed with a visited set. *name* itself appears in the
    result only when it sits on a cycle.

    Args:
        name: Package to explain.
        packages: Parsed lockfile packages.

    Returns:
        Set of dependent package names. Empty if *name* is not in the
        lockfile.
    """
    if not any(package.name == name for package in packages):
        return set()

    dependents = reverse_index(packages)
    found: set[str] = set()
    queue: deque[str] = deque([name])

    while queue:
        current = queue.popleft()
        for parent in dependents.get(current, ()):
            if parent not in found:
                found.add(parent)
                queue.append(parent)

    return found
