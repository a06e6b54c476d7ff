"""``pluginosv expand <lockfile> <package>`` -- Show a transitive closure.

Exit Codes:
    0 -- Closure printed.
    1 -- The package is not in the lockfile.
    2 -- The lockfile is unsupported or could not be parsed.
"""

from __future__ import annotations

import json
import sys

import click

from pluginosv.core.dependency import PackageFlattened, expand
from pluginosv.core.lockfile import default_registry
from pluginosv.exceptions import LockfileError, PackageNotFoundError


def _flattened_to_json(flattened: PackageFlattened) -> dict:
    return {
        "name": flattened.name,
        "version": flattened.version,
        "count": len(flattened.dependencies),
        "dependencies": [
            {"name": d.package.name, "version": d.package.version}
            for d in flattened.dependencies
        ],
    }


@click.command("expand")
@click.argument("lockfile_path", type=click.Path(dir_okay=False))
@click.argument("package")
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text).",
)
@click.option(
    "--all-versions",
    is_flag=True,
    help="Seed the closure with every resolved version of PACKAGE.",
)
def expand_command(
    lockfile_path: str,
    package: str,
    output_format: str,
    all_versions: bool,
) -> None:
    """Print every package PACKAGE pulls in, transitively."""
    try:
        packages = default_registry().parse(lockfile_path)
    except LockfileError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(2)

    try:
        flattened = expand(package, packages, all_versions=all_versions)
    except PackageNotFoundError as exc:
        if output_format == "json":
            click.echo(json.dumps({"error": str(exc)}))
        else:
            click.echo(f"Error: {exc}")
        sys.exit(1)

    if output_format == "json":
        click.echo(json.dumps(_flattened_to_json(flattened), indent=2))
    else:
        from pluginosv.cli.output import print_closure
        print_closure(flattened)

    sys.exit(0)
