"""``pluginosv filter <results.json> --lockfile <path>`` -- Filter scan results.

Reads osv-scanner JSON output, removes package entries that a trusted Grafana
package pulls in, and writes the filtered document. Lockfile problems never
fail the command: the results are written back unfiltered.

Exit Codes:
    0 -- Filtered (or passed-through) results written.
    1 -- The results file or configuration could not be read.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from pluginosv.config import FilterConfig, load_config
from pluginosv.core.osv import VulnerabilityFilter, summarize
from pluginosv.exceptions import ConfigError


@click.command("filter")
@click.argument("results_path", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--lockfile", "-l",
    "lockfile_path",
    required=True,
    type=click.Path(dir_okay=False),
    help="Lockfile the scan was run against (yarn.lock, package-lock.json, ...).",
)
@click.option(
    "--output", "-o",
    type=click.Path(dir_okay=False),
    default=None,
    help="Write filtered JSON here instead of stdout.",
)
@click.option(
    "--config", "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="YAML file overriding trusted packages and suppressions.",
)
@click.option(
    "--summary",
    is_flag=True,
    help="Print removed packages and remaining severities to stderr.",
)
def filter_command(
    results_path: str,
    lockfile_path: str,
    output: str | None,
    config_path: str | None,
    summary: bool,
) -> None:
    """Remove findings attributable to trusted Grafana packages.

    RESULTS_PATH is the JSON written by ``osv-scanner --json``.
    """
    try:
        config = load_config(Path(config_path)) if config_path else FilterConfig()
    except ConfigError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    try:
        raw = json.loads(Path(results_path).read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        click.echo(f"Error: could not read scan results {results_path}: {exc}", err=True)
        sys.exit(1)

    outcome = VulnerabilityFilter(config).filter_with_details(raw, lockfile_path)
    rendered = json.dumps(outcome.results, indent=2)

    if output:
        Path(output).write_text(rendered + "\n", encoding="utf-8")
    else:
        click.echo(rendered)

    if summary:
        from pluginosv.cli.output import print_filter_summary
        print_filter_summary(outcome, summarize(outcome.results))

    sys.exit(0)
