"""Shared fixtures for pluginosv tests."""

from __future__ import annotations

import json
import pathlib
from typing import Any

import pytest

FIXTURES = pathlib.Path(__file__).parent / "fixtures"
LOCKFILES = FIXTURES / "lockfiles"


@pytest.fixture
def lockfiles_dir() -> pathlib.Path:
    """Directory holding one sub-directory per sample lockfile."""
    return LOCKFILES


@pytest.fixture
def grafana_yarn_lock() -> pathlib.Path:
    """yarn v1 lockfile with the Grafana SDK packages, cycles and a fork."""
    return LOCKFILES / "grafana-yarn" / "yarn.lock"


@pytest.fixture
def osv_results_path() -> pathlib.Path:
    """osv-scanner JSON reporting d3-color, moment, regenerator-runtime and qs."""
    return FIXTURES / "osv" / "results.json"


@pytest.fixture
def osv_results(osv_results_path: pathlib.Path) -> dict[str, Any]:
    """Decoded osv-scanner results (a fresh copy per test)."""
    return json.loads(osv_results_path.read_text(encoding="utf-8"))


@pytest.fixture
def make_results():
    """Factory for a minimal single-source scan document.

    Each positional argument is ``(name, version)``; every entry carries
    one HIGH vulnerability.
    """

    def _make(*packages: tuple[str, str]) -> dict[str, Any]:
        return {
            "results": [
                {
                    "source": {"path": "/plugin/yarn.lock", "type": "lockfile"},
                    "packages": [
                        {
                            "package": {
                                "name": name,
                                "version": version,
                                "ecosystem": "npm",
                            },
                            "vulnerabilities": [
                                {
                                    "id": f"GHSA-{name}",
                                    "aliases": [f"CVE-{name}"],
                                    "database_specific": {"severity": "HIGH"},
                                }
                            ],
                            "groups": [{"ids": [f"GHSA-{name}"]}],
                        }
                        for name, version in packages
                    ],
                }
            ]
        }

    return _make
