"""Tests for severity summaries and the read-only scan-result views."""

from __future__ import annotations

from pathlib import Path

import pytest

from pluginosv.core.osv import (
    PackageRef,
    ReportedIssue,
    Severity,
    filter_results,
    package_names,
    summarize,
)


class TestSeverityParse:

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("CRITICAL", Severity.CRITICAL),
            ("high", Severity.HIGH),
            ("Moderate", Severity.MODERATE),
            ("LOW", Severity.LOW),
            ("medium", Severity.UNKNOWN),
            (None, Severity.UNKNOWN),
        ],
    )
    def test_labels(self, raw, expected: Severity) -> None:
        assert Severity.parse(raw) is expected


class TestPackageRef:

    def test_from_entry(self) -> None:
        ref = PackageRef.from_entry(
            {"package": {"name": "moment", "version": "2.29.4", "ecosystem": "npm"}}
        )
        assert ref == PackageRef("moment", "2.29.4", "npm")

    @pytest.mark.parametrize(
        "entry",
        [None, "moment", {}, {"package": None}, {"package": {"version": "1.0.0"}}],
    )
    def test_no_identity(self, entry) -> None:
        assert PackageRef.from_entry(entry) is None

    def test_package_names(self, osv_results) -> None:
        assert package_names(osv_results) == [
            "d3-color",
            "moment",
            "regenerator-runtime",
            "qs",
        ]


class TestSummarize:
    """Unique messages and per-severity counts."""

    def test_raw_fixture(self, osv_results) -> None:
        report = summarize(osv_results)
        assert report.total == 4
        assert report.counts[Severity.HIGH] == 2
        assert report.counts[Severity.CRITICAL] == 1
        assert report.counts[Severity.MODERATE] == 1
        assert report.counts[Severity.LOW] == 0
        assert report.has_critical

    def test_duplicate_messages_count_once(self, osv_results) -> None:
        report = summarize(osv_results)
        qs_issues = [issue for issue in report.issues if issue.package == "qs"]
        assert len(qs_issues) == 1

    def test_message_format(self) -> None:
        issue = ReportedIssue(
            severity=Severity.HIGH,
            package="moment",
            aliases=("CVE-2022-31129", "GHSA-wc69-rhjr-hc9g"),
        )
        assert issue.message == (
            "SEVERITY: HIGH in package moment, "
            "vulnerable to CVE-2022-31129 GHSA-wc69-rhjr-hc9g"
        )

    def test_filtered_fixture(self, osv_results, grafana_yarn_lock: Path) -> None:
        report = summarize(filter_results(osv_results, grafana_yarn_lock))
        assert [issue.package for issue in report.issues] == ["d3-color", "qs"]
        assert not report.has_critical

    def test_missing_severity_is_unknown(self) -> None:
        results = {
            "results": [
                {
                    "packages": [
                        {
                            "package": {"name": "x", "version": "1"},
                            "vulnerabilities": [{"id": "GHSA-1", "aliases": []}],
                        }
                    ]
                }
            ]
        }
        report = summarize(results)
        assert report.issues[0].severity is Severity.UNKNOWN
        assert report.counts[Severity.UNKNOWN] == 1

    def test_empty(self) -> None:
        report = summarize({})
        assert report.total == 0
        assert all(count == 0 for count in report.counts.values())
