"""osv-scanner result handling: filtering and severity summaries.

Submodules:

- ``models``: Read-only views of the scanner JSON (``PackageRef``, ``Severity``).
- ``filter``: ``VulnerabilityFilter`` and ``filter_results``.
- ``report``: ``summarize`` unique issues per severity.
"""

from pluginosv.core.osv.filter import (
    Exclusion,
    FilterOutcome,
    VulnerabilityFilter,
    filter_results,
)
from pluginosv.core.osv.models import PackageRef, Severity, package_names
from pluginosv.core.osv.report import ReportedIssue, SeverityReport, summarize

__all__ = [
    "Exclusion",
    "FilterOutcome",
    "PackageRef",
    "ReportedIssue",
    "Severity",
    "SeverityReport",
    "VulnerabilityFilter",
    "filter_results",
    "package_names",
    "summarize",
]
