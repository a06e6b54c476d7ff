"""pluginosv CLI: lockfile attribution for Grafana plugin vulnerability scans.

Entry point for the ``pluginosv`` command-line tool. Registers all
subcommands under a single Click group.

Commands:
    filter  -- Drop osv-scanner findings attributable to trusted packages.
    expand  -- Print the transitive closure of one package in a lockfile.
    why     -- Explain which packages pull a given package in.

Usage::

    pluginosv filter osv.json --lockfile ./plugin/yarn.lock
    pluginosv filter osv.json -l ./plugin/pnpm-lock.yaml --summary -o filtered.json
    pluginosv expand ./plugin/yarn.lock @grafana/data
    pluginosv -v why ./plugin/package-lock.json moment --format json
"""

from __future__ import annotations

import logging

import click

from pluginosv import __version__
from pluginosv.cli.expand_cmd import expand_command
from pluginosv.cli.filter_cmd import filter_command
from pluginosv.cli.why_cmd import why_command

_LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging on stderr.")
def cli(verbose: bool) -> None:
    """pluginosv: Attribute lockfile vulnerabilities to trusted Grafana packages.

    Parses yarn, npm and pnpm lockfiles, expands the dependency closures of
    the Grafana front-end SDK packages, and removes scan findings that only
    reach a plugin through them.
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format=_LOG_FORMAT)


cli.add_command(filter_command)
cli.add_command(expand_command)
cli.add_command(why_command)
