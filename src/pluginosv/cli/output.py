"""Rich output formatting helpers for the pluginosv CLI.

Severity Color Mapping (osv-scanner labels):
    CRITICAL = bold red, HIGH = yellow, MODERATE = cyan, LOW = green
"""

from __future__ import annotations

from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from pluginosv.core.dependency import PackageFlattened
from pluginosv.core.osv import FilterOutcome, Severity, SeverityReport

_SEVERITY_STYLES: dict[Severity, str] = {
    Severity.CRITICAL: "bold red",
    Severity.HIGH: "yellow",
    Severity.MODERATE: "cyan",
    Severity.LOW: "green",
}

console = Console()
err_console = Console(stderr=True)


def severity_style(severity: Severity) -> str:
    """Return the Rich style string for a given severity level."""
    return _SEVERITY_STYLES.get(severity, "white")


def print_closure(flattened: PackageFlattened) -> None:
    """Print the transitive closure of one package.

    Args:
        flattened: Closure from ``expand``.
    """
    table = Table(
        title=f"{flattened.name}@{flattened.version}",
        show_header=True,
        header_style="bold",
    )
    table.add_column("Dependency", style="bold")
    table.add_column("Declared", style="dim")
    for state in flattened.dependencies:
        table.add_row(state.package.name, state.package.version)
    console.print(table)
    console.print(f"[bold]{len(flattened.dependencies)}[/bold] transitive dependencies")


def print_why(explanation: dict[str, Any]) -> None:
    """Print attribution and reverse dependents for one package."""
    name = explanation["package"]
    if not explanation["in_lockfile"]:
        console.print(f"[dim]{name} is not in the lockfile.[/dim]")
        return

    if explanation["attributed"]:
        verdict = f"[green]attributed to {explanation['root']}[/green]"
    else:
        verdict = "[red]not attributable to a trusted package[/red]"
    console.print(Panel(f"[bold]{name}[/bold]: {verdict}", title="Attribution"))

    roots = explanation["trusted_roots"]
    if roots:
        console.print("Trusted roots: " + ", ".join(roots))

    dependents = explanation["included_by"]
    if not dependents:
        console.print("[dim]No package depends on it (direct dependency of the plugin).[/dim]")
        return
    table = Table(title="Included By", show_header=False)
    table.add_column("Package")
    for dependent in dependents:
        table.add_row(dependent)
    console.print(table)


def print_filter_summary(outcome: FilterOutcome, report: SeverityReport) -> None:
    """Print what the filter removed and what remains, to stderr.

    Args:
        outcome: Result of ``VulnerabilityFilter.filter_with_details``.
        report: Severity summary of the filtered results.
    """
    if not outcome.filtered:
        err_console.print("[yellow]Results passed through unfiltered.[/yellow]")
    elif outcome.exclusions:
        table = Table(title="Removed Packages", show_header=True, header_style="bold")
        table.add_column("Package", style="bold")
        table.add_column("Version", style="dim")
        table.add_column("Reason")
        for exclusion in outcome.exclusions:
            reason = exclusion.root or exclusion.reason
            table.add_row(exclusion.name, exclusion.version, reason)
        err_console.print(table)
    else:
        err_console.print("[dim]No packages removed.[/dim]")

    parts = [f"[bold]{report.total}[/bold] unique issues"]
    for severity in (Severity.CRITICAL, Severity.HIGH, Severity.MODERATE, Severity.LOW):
        count = report.counts[severity]
        if count:
            parts.append(f"[{severity_style(severity)}]{count} {severity.value.lower()}[/]")
    err_console.print(" | ".join(parts))
