"""Tests for the trusted-package cache and attribution queries."""

from __future__ import annotations

from pathlib import Path

import pytest

from pluginosv.core.dependency import expand
from pluginosv.core.lockfile import Dependency, PackageDetails, parse_yarn_lock
from pluginosv.core.trust import (
    TRUSTED_PACKAGES,
    TrustedPackageCache,
    all_attributions,
    attributed_to,
    build_cache,
)


def _pkg(name: str, version: str = "1.0.0", deps: list[str] | None = None) -> PackageDetails:
    return PackageDetails(
        name=name,
        version=version,
        dependencies=tuple(Dependency(d, "1.0.0") for d in (deps or [])),
    )


@pytest.fixture
def yarn_packages(grafana_yarn_lock: Path) -> list[PackageDetails]:
    return parse_yarn_lock(grafana_yarn_lock)


class TestTrustedPackages:

    def test_default_roots(self) -> None:
        assert TRUSTED_PACKAGES == {
            "@grafana/data",
            "@grafana/e2e",
            "@grafana/runtime",
            "@grafana/toolkit",
            "@grafana/ui",
        }

    def test_other_grafana_packages_not_trusted_by_default(self) -> None:
        """Findings under untrusted Grafana packages stay visible."""
        packages = [_pkg("@grafana/schema", deps=["tslib"]), _pkg("tslib")]
        assert build_cache(packages) == []
        assert len(build_cache(packages, TRUSTED_PACKAGES | {"@grafana/schema"})) == 1


class TestBuildCache:
    """One closure per trusted root present in the lockfile."""

    def test_only_present_roots(self, yarn_packages) -> None:
        cache = build_cache(yarn_packages)
        assert [entry.name for entry in cache] == [
            "@grafana/data",
            "@grafana/runtime",
            "@grafana/ui",
        ]

    def test_entries_match_expand(self, yarn_packages) -> None:
        cache = build_cache(yarn_packages)
        assert cache[0] == expand("@grafana/data", yarn_packages, all_versions=True)

    def test_no_trusted_roots(self) -> None:
        assert build_cache([_pkg("express", deps=["qs"]), _pkg("qs")]) == []

    def test_custom_trusted_list(self, yarn_packages) -> None:
        cache = build_cache(yarn_packages, trusted=["express", "not-installed"])
        assert [entry.name for entry in cache] == ["express"]

    def test_root_with_several_versions_uses_union(self) -> None:
        packages = [
            _pkg("@grafana/data", "9.0.0", deps=["old-dep"]),
            _pkg("@grafana/data", "10.0.0", deps=["new-dep"]),
            _pkg("new-dep"),
            _pkg("old-dep"),
        ]
        (entry,) = build_cache(packages)
        assert entry.dependency_names == ["new-dep", "old-dep"]

    def test_duplicate_roots_in_trusted_list(self, yarn_packages) -> None:
        cache = build_cache(yarn_packages, trusted=["@grafana/data", "@grafana/data"])
        assert len(cache) == 1


class TestAttribution:
    """Name lookups against the cache."""

    def test_moment_attributed_to_data(self, yarn_packages) -> None:
        cache = build_cache(yarn_packages)
        assert attributed_to("moment", cache) == (True, "@grafana/data")

    def test_first_root_in_sorted_order_wins(self, yarn_packages) -> None:
        cache = build_cache(yarn_packages)
        assert attributed_to("regenerator-runtime", cache) == (True, "@grafana/runtime")
        assert all_attributions("regenerator-runtime", cache) == [
            "@grafana/runtime",
            "@grafana/ui",
        ]

    @pytest.mark.parametrize("name", ["d3-color", "express", "body-parser", "left-pad"])
    def test_not_attributed(self, yarn_packages, name: str) -> None:
        cache = build_cache(yarn_packages)
        assert attributed_to(name, cache) == (False, "")
        assert all_attributions(name, cache) == []

    def test_root_itself_only_via_another_root(self, yarn_packages) -> None:
        """A trusted root is attributed only when another root pulls it in."""
        cache = build_cache(yarn_packages)
        assert attributed_to("@grafana/runtime", cache) == (False, "")
        assert attributed_to("@grafana/data", cache) == (True, "@grafana/runtime")

    def test_empty_cache(self) -> None:
        assert attributed_to("moment", []) == (False, "")


class TestTrustedPackageCache:

    def test_wraps_build_cache(self, yarn_packages) -> None:
        cache = TrustedPackageCache.from_packages(yarn_packages)
        assert cache.roots == ["@grafana/data", "@grafana/runtime", "@grafana/ui"]
        assert len(cache) == 3
        assert list(cache) == build_cache(yarn_packages)

    def test_membership(self, yarn_packages) -> None:
        cache = TrustedPackageCache.from_packages(yarn_packages)
        assert "moment" in cache
        assert "d3-color" not in cache
        assert 42 not in cache

    def test_attributed_to(self, yarn_packages) -> None:
        cache = TrustedPackageCache.from_packages(yarn_packages)
        assert cache.attributed_to("tslib") == (True, "@grafana/data")
