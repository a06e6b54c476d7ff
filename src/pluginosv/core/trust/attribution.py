"""Attribution of reported packages to trusted root packages.

A finding against a package that only reaches the plugin through a trusted
root (``@grafana/data`` pulling in ``moment``, say) is not the plugin
author's fault. These helpers answer "which trusted root, if any, pulls this
name in" against a list of precomputed closures.
"""

from __future__ import annotations

from collections.abc import Iterable

from pluginosv.core.dependency.graph import PackageFlattened


def attributed_to(name: str, cache: Iterable[PackageFlattened]) -> tuple[bool, str]:
    """Find the first trusted root whose closure contains *name*.

    Matching is by name only, across any resolved version.

    Args:
        name: Package name reported by the scanner.
        cache: Closures, normally from ``build_cache`` (sorted by root).

    Returns:
        ``(True, root_name)`` on a hit, ``(False, "")`` otherwise.
    """
    for flattened in cache:
        if flattened.contains(name):
            return True, flattened.name
    return False, ""


def all_attributions(name: str, cache: Iterable[PackageFlattened]) -> list[str]:
    """Return every trusted root whose closure contains *name*, in cache order."""
    return [flattened.name for flattened in cache if flattened.contains(name)]
