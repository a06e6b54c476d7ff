"""Precomputed closures of the trusted Grafana front-end SDK packages.

A vulnerability scanner reports findings against a leaf package with no
indication of which top-level dependency introduced it. Expanding every
trusted root once per run turns each later attribution query into a bounded
membership scan instead of a fresh graph walk.

The cache lives for a single filter call and is never persisted.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from pluginosv.core.dependency.graph import PackageFlattened, expand
from pluginosv.core.lockfile.models import PackageDetails
from pluginosv.core.trust.attribution import attributed_to
from pluginosv.exceptions import PackageNotFoundError

logger = logging.getLogger(__name__)

# Packages published by Grafana whose transitive dependencies are not held
# against plugin authors.
TRUSTED_PACKAGES: frozenset[str] = frozenset({
    "@grafana/data",
    "@grafana/e2e",
    "@grafana/runtime",
    "@grafana/toolkit",
    "@grafana/ui",
})


def build_cache(
    packages: list[PackageDetails],
    trusted: Iterable[str] = TRUSTED_PACKAGES,
) -> list[PackageFlattened]:
    """Expand every trusted root present in *packages*.

    Each root is seeded with the edges of all its resolved versions. A root
    missing from this lockfile is omitted; it never aborts the others.

    Args:
        packages: Parsed lockfile packages.
        trusted: Root names to expand.

    Returns:
        One closure per present root, sorted by root name.
    """
    present = {package.name for package in packages}
    cache: list[PackageFlattened] = []

    for root in sorted(set(trusted)):
        if root not in present:
            continue
        try:
            cache.append(expand(root, packages, all_versions=True))
        except PackageNotFoundError:
            logger.debug("Trusted package %s not expandable, omitting", root)

    return cache


class TrustedPackageCache:
    """Closures of the trusted roots for one lockfile.

    Example::

        cache = TrustedPackageCache.from_packages(parse_yarn_lock("yarn.lock"))
        found, root = cache.attributed_to("moment")
    """

    def __init__(self, entries: list[PackageFlattened]) -> None:
        self._entries = entries

    @classmethod
    def from_packages(
        cls,
        packages: list[PackageDetails],
        trusted: Iterable[str] = TRUSTED_PACKAGES,
    ) -> TrustedPackageCache:
        """Build the cache for *packages*."""
        return cls(build_cache(packages, trusted))

    @property
    def roots(self) -> list[str]:
        """Return the cached root names, sorted."""
        return [entry.name for entry in self._entries]

    def attributed_to(self, name: str) -> tuple[bool, str]:
        """Return the first trusted root pulling in *name*."""
        return attributed_to(name, self._entries)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.attributed_to(name)[0]

    def __iter__(self) -> Iterator[PackageFlattened]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)
