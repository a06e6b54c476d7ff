"""``pluginosv why <lockfile> <package>`` -- Explain why a package is installed.

Shows which trusted Grafana packages pull PACKAGE in (the attribution the
filter would make) and every package that depends on it, transitively.

Exit Codes:
    0 -- Explanation printed (including "not in lockfile").
    2 -- The lockfile is unsupported or could not be parsed.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from pluginosv.config import FilterConfig, load_config
from pluginosv.core.dependency import included_by
from pluginosv.core.lockfile import default_registry
from pluginosv.core.trust import TrustedPackageCache, all_attributions
from pluginosv.exceptions import ConfigError, LockfileError


@click.command("why")
@click.argument("lockfile_path", type=click.Path(dir_okay=False))
@click.argument("package")
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text).",
)
@click.option(
    "--config", "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="YAML file overriding the trusted package list.",
)
def why_command(
    lockfile_path: str,
    package: str,
    output_format: str,
    config_path: str | None,
) -> None:
    """Explain which packages pull PACKAGE into the lockfile."""
    try:
        config = load_config(Path(config_path)) if config_path else FilterConfig()
        packages = default_registry().parse(lockfile_path)
    except (ConfigError, LockfileError) as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(2)

    cache = TrustedPackageCache.from_packages(packages, config.trusted_packages)
    found, root = cache.attributed_to(package)
    explanation = {
        "package": package,
        "in_lockfile": any(p.name == package for p in packages),
        "attributed": found,
        "root": root,
        "trusted_roots": all_attributions(package, cache),
        "included_by": sorted(included_by(package, packages)),
    }

    if output_format == "json":
        click.echo(json.dumps(explanation, indent=2))
    else:
        from pluginosv.cli.output import print_why
        print_why(explanation)

    sys.exit(0)
