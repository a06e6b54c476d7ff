"""Lockfile data models: Dependency, PackageDetails, Ecosystem.

Every parser (yarn, npm, pnpm) converges on these types. They are pure data
holders with no business logic, so downstream modules (graph expansion,
trusted-package cache, scan filter) can import them without pulling in any
parser.

All models are frozen. A lookup can therefore hand out the stored record
itself: nobody downstream can mutate it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Ecosystem(str, Enum):
    """Package-manager dialect of a lockfile entry.

    yarn, npm and pnpm all resolve packages from the npm registry and
    normalize to ``NPM``.
    """

    NPM = "npm"


# ---------------------------------------------------------------------------
# Dependency: one edge of the package graph
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Dependency:
    """A dependency edge as declared by its parent package.

    Attributes:
        name: Target package name (e.g., "@grafana/data").
        version: The *declared* range or pin (e.g., "^9.5.2"), not
            necessarily the resolved version.
    """

    name: str
    version: str


# ---------------------------------------------------------------------------
# PackageDetails: one resolved package
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PackageDetails:
    """One resolved package as it appears in a lockfile.

    A lockfile may legitimately hold several ``PackageDetails`` with the
    same name and different versions.

    Attributes:
        name: Package name, including any ``@scope/`` prefix.
        version: Resolved version. Empty when only a commit or a ``file:``
            reference is known.
        ecosystem: Dialect tag, always ``Ecosystem.NPM`` for JS lockfiles.
        compare_as: Ecosystem whose version ordering applies.
        commit: VCS ref when the package is pinned to git rather than a
            registry version.
        dependencies: Declared outgoing edges.
    """

    name: str
    version: str
    ecosystem: Ecosystem = Ecosystem.NPM
    compare_as: Ecosystem = Ecosystem.NPM
    commit: str = ""
    dependencies: tuple[Dependency, ...] = field(default_factory=tuple)

    @property
    def identity(self) -> str:
        """Dedup key: ``name@commit`` for git pins, else ``name@version``."""
        return f"{self.name}@{self.commit or self.version}"
