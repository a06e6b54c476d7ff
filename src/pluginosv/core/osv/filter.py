"""Drop scan findings attributable to trusted Grafana packages.

Pipeline for one call:

1. Pick a lockfile parser from the lockfile's base name. Bypassed
   manifests (``go.mod``) and unknown names pass through unfiltered.
2. Parse the lockfile. Any failure fails open: the raw results come back
   unchanged and a warning is logged.
3. Expand every trusted root present in the lockfile.
4. For each reported package entry: drop it if ``name@version`` is
   suppressed, else drop it if a trusted root pulls it in, else keep it.

Only whole package entries are removed. Sources, vulnerabilities and groups
are carried through by reference. A missed attribution (an extra warning) is
far less harmful than a hidden vulnerability, so every internal failure
returns the unfiltered input.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pluginosv.config import FilterConfig
from pluginosv.core.lockfile.registry import LockfileParserRegistry, default_registry
from pluginosv.core.osv.models import PackageRef, result_sources
from pluginosv.core.trust.cache import TrustedPackageCache
from pluginosv.exceptions import LockfileError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Exclusion:
    """One package entry removed from the results.

    Attributes:
        name: Reported package name.
        version: Reported package version.
        reason: ``"suppressed"`` or ``"attributed"``.
        root: Trusted root that pulls the package in (attributed only).
    """

    name: str
    version: str
    reason: str
    root: str = ""


@dataclass
class FilterOutcome:
    """Filtered results plus an account of what was removed.

    Attributes:
        results: The filtered scan document.
        exclusions: Removed entries, in document order.
        filtered: False when the input was returned unfiltered (bypass,
            empty input, or fail-open).
    """

    results: Any
    exclusions: list[Exclusion] = field(default_factory=list)
    filtered: bool = True


class VulnerabilityFilter:
    """Filters osv-scanner results against a lockfile.

    Example::

        vuln_filter = VulnerabilityFilter()
        filtered = vuln_filter.filter(raw_results, "plugin/yarn.lock")
    """

    def __init__(
        self,
        config: FilterConfig | None = None,
        registry: LockfileParserRegistry | None = None,
    ) -> None:
        self.config = config or FilterConfig()
        self.registry = registry or default_registry()

    def filter(self, results: Any, lockfile_path: str | Path) -> Any:
        """Return *results* without entries attributable to trusted roots."""
        return self.filter_with_details(results, lockfile_path).results

    def filter_with_details(self, results: Any, lockfile_path: str | Path) -> FilterOutcome:
        """Filter *results* and report which entries were removed.

        Args:
            results: Raw osv-scanner JSON document.
            lockfile_path: Lockfile the scan was run against.

        Returns:
            A ``FilterOutcome``. Its ``results`` is *results* itself when
            nothing could be filtered.
        """
        lockfile_name = Path(lockfile_path).name
        if lockfile_name in self.config.bypass_files:
            logger.debug("Not filtering %s", lockfile_name)
            return FilterOutcome(results=results, filtered=False)

        if not result_sources(results):
            return FilterOutcome(results=results, filtered=False)

        if not self.registry.supports(lockfile_path):
            logger.warning(
                "No lockfile parser for %s, returning unfiltered results", lockfile_path
            )
            return FilterOutcome(results=results, filtered=False)

        try:
            packages = self.registry.parse(lockfile_path)
            cache = TrustedPackageCache.from_packages(
                packages, self.config.trusted_packages
            )
        except LockfileError as exc:
            logger.warning("%s, returning unfiltered results", exc)
            return FilterOutcome(results=results, filtered=False)
        except Exception:
            logger.warning(
                "Failed to build trusted package cache for %s, returning unfiltered results",
                lockfile_path,
                exc_info=True,
            )
            return FilterOutcome(results=results, filtered=False)

        exclusions: list[Exclusion] = []
        filtered_sources = [
            self._filter_source(source, cache, exclusions) if isinstance(source, dict) else source
            for source in results["results"]
        ]
        return FilterOutcome(
            results={**results, "results": filtered_sources},
            exclusions=exclusions,
        )

    def _filter_source(
        self,
        source: dict[str, Any],
        cache: TrustedPackageCache,
        exclusions: list[Exclusion],
    ) -> dict[str, Any]:
        packages = source.get("packages")
        if not isinstance(packages, list):
            return source

        kept: list[Any] = []
        for entry in packages:
            ref = PackageRef.from_entry(entry)
            if ref is None:
                kept.append(entry)
                continue

            if self.config.is_suppressed(ref.name, ref.version):
                logger.debug("suppressed: %s@%s", ref.name, ref.version)
                exclusions.append(Exclusion(ref.name, ref.version, "suppressed"))
                continue

            found, root = cache.attributed_to(ref.name)
            if found:
                logger.debug("excluded by filters: %s (via %s)", ref.name, root)
                exclusions.append(Exclusion(ref.name, ref.version, "attributed", root))
                continue

            logger.debug("not filtered: %s", ref.name)
            kept.append(entry)

        return {**source, "packages": kept}


def filter_results(
    results: Any,
    lockfile_path: str | Path,
    config: FilterConfig | None = None,
) -> Any:
    """Filter osv-scanner *results* against *lockfile_path*.

    Convenience wrapper around ``VulnerabilityFilter(config).filter``.
    """
    return VulnerabilityFilter(config).filter(results, lockfile_path)
