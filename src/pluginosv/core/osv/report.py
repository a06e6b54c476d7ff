"""Severity summary of (filtered) scan results.

The validator reports each unique vulnerability once, as a message of the
form::

    SEVERITY: HIGH in package lodash, vulnerable to CVE-2021-23337 GHSA-35jh-r3h4-6jhm

and then a count per severity. Identical messages (the same advisory seen
through two sources) count once.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pluginosv.core.osv.models import PackageRef, Severity, iter_package_entries


@dataclass(frozen=True)
class ReportedIssue:
    """One unique vulnerability message."""

    severity: Severity
    package: str
    aliases: tuple[str, ...]

    @property
    def message(self) -> str:
        return (
            f"SEVERITY: {self.severity.value} in package {self.package}, "
            f"vulnerable to {' '.join(self.aliases)}"
        )


@dataclass
class SeverityReport:
    """Unique issues and per-severity counts."""

    issues: list[ReportedIssue] = field(default_factory=list)
    counts: dict[Severity, int] = field(
        default_factory=lambda: {severity: 0 for severity in Severity}
    )

    @property
    def total(self) -> int:
        return len(self.issues)

    @property
    def has_critical(self) -> bool:
        return self.counts[Severity.CRITICAL] > 0


def _severity_of(vulnerability: dict[str, Any]) -> Severity:
    database_specific = vulnerability.get("database_specific")
    if not isinstance(database_specific, dict):
        return Severity.UNKNOWN
    return Severity.parse(database_specific.get("severity"))


def summarize(results: Any) -> SeverityReport:
    """Count unique vulnerability messages per severity.

    Args:
        results: osv-scanner JSON document, filtered or not.

    Returns:
        A ``SeverityReport`` with issues in first-seen order.
    """
    report = SeverityReport()
    seen: set[str] = set()

    for entry in iter_package_entries(results):
        ref = PackageRef.from_entry(entry)
        vulnerabilities = entry.get("vulnerabilities")
        if ref is None or not isinstance(vulnerabilities, list):
            continue
        for vulnerability in vulnerabilities:
            if not isinstance(vulnerability, dict):
                continue
            aliases = vulnerability.get("aliases")
            issue = ReportedIssue(
                severity=_severity_of(vulnerability),
                package=ref.name,
                aliases=tuple(str(a) for a in aliases) if isinstance(aliases, list) else (),
            )
            if issue.message in seen:
                continue
            seen.add(issue.message)
            report.issues.append(issue)
            report.counts[issue.severity] += 1

    return report
