"""Parser for ``yarn.lock`` files (yarn v1 and berry).

yarn.lock is line-oriented rather than a standard data format. Each resolved
package is a block that starts at a zero-indentation header and continues
through the indented lines below it:

.. code-block:: text

    "@grafana/data@9.5.2", "@grafana/data@^9.5.2":
      version "9.5.2"
      resolved "https://registry.yarnpkg.com/@grafana/data/-/data-9.5.2.tgz#..."
      dependencies:
        "@braintree/sanitize-url" "6.0.2"
        moment "2.29.4"

Berry (v2+) writes the same structure with ``key: value`` pairs and a
``__metadata:`` block, which is skipped.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pluginosv.core.lockfile.commit import try_extract_commit
from pluginosv.core.lockfile.models import Dependency, Ecosystem, PackageDetails
from pluginosv.core.lockfile.regex import cached_compile
from pluginosv.exceptions import LockfileDecodeError, LockfileReadError

logger = logging.getLogger(__name__)

_VERSION_PATTERN = r'^ {2}version:? "?([\w.-]+)"?$'
_RESOLUTION_PATTERN = r'^ {2}(?:resolution:|resolved) "([^ \'"]+)"$'
_DEPENDENCIES_HEADER = "  dependencies:"
_DEPENDENCY_INDENT = "    "
_METADATA_HEADER = "__metadata:"


def _should_skip_line(line: str) -> bool:
    return line.strip() == "" or line.startswith("#")


def group_package_lines(lines: list[str]) -> list[list[str]]:
    """Split lockfile lines into one group per package block.

    Blank and comment lines are dropped. A line without leading whitespace
    opens a new group.

    Args:
        lines: Raw lockfile lines, without line terminators.

    Returns:
        List of line groups; each group starts with its header line.
    """
    groups: list[list[str]] = []
    group: list[str] = []

    for line in lines:
        if _should_skip_line(line):
            continue
        if not line.startswith(" "):
            if group:
                groups.append(group)
            group = []
        group.append(line)

    if group:
        groups.append(group)
    return groups


def extract_package_name(header: str) -> str:
    """Extract the package name from a block header.

    ``"@babel/core@^7.0.0", "@babel/core@^7.1.0":`` yields ``@babel/core``;
    ``abab@^2.0.3:`` yields ``abab``.
    """
    value = header.lstrip('"')
    scoped = value.startswith("@")
    if scoped:
        value = value[1:]
    name = value.split("@", 1)[0]
    # A header without any "@range" still ends with the block colon
    name = name.split(",", 1)[0].rstrip(':"')
    return "@" + name if scoped else name


def extract_dependencies(group: list[str]) -> tuple[Dependency, ...]:
    """Extract the ``dependencies:`` sub-block of a package group."""
    try:
        offset = group.index(_DEPENDENCIES_HEADER) + 1
    except ValueError:
        return ()

    dependencies: list[Dependency] = []
    for line in group[offset:]:
        if not line.startswith(_DEPENDENCY_INDENT):
            break
        fields = line.strip().split(" ")
        if len(fields) != 2:
            continue
        name = fields[0].lstrip('"').rstrip(':"')
        dependencies.append(Dependency(name=name, version=fields[1].strip('"')))
    return tuple(dependencies)


def _first_match(pattern: str, group: list[str]) -> str:
    regex = cached_compile(pattern)
    for line in group:
        matched = regex.match(line)
        if matched is not None:
            return matched.group(1)
    return ""


def determine_version(group: list[str]) -> str:
    """Return the ``version`` of a package group, or ``""`` if absent."""
    return _first_match(_VERSION_PATTERN, group)


def determine_resolution(group: list[str]) -> str:
    """Return the ``resolved``/``resolution`` URL of a group, or ``""``."""
    return _first_match(_RESOLUTION_PATTERN, group)


def parse_package_group(group: list[str]) -> PackageDetails:
    """Turn one package block into a ``PackageDetails``."""
    name = extract_package_name(group[0])
    version = determine_version(group)
    if not version:
        logger.warning(
            "Failed to determine version of %s while parsing a yarn.lock", name
        )

    return PackageDetails(
        name=name,
        version=version,
        ecosystem=Ecosystem.NPM,
        compare_as=Ecosystem.NPM,
        commit=try_extract_commit(determine_resolution(group)),
        dependencies=extract_dependencies(group),
    )


def parse_yarn_lock_text(text: str) -> list[PackageDetails]:
    """Parse yarn.lock content already read into memory.

    Args:
        text: Full lockfile text.

    Returns:
        Packages sorted by name. Multiple versions of one name keep their
        lockfile order.
    """
    packages: list[PackageDetails] = []
    for group in group_package_lines(text.removeprefix("\ufeff").splitlines()):
        if group[0] == _METADATA_HEADER:
            continue
        packages.append(parse_package_group(group))

    packages.sort(key=lambda p: p.name)
    return packages


def parse_yarn_lock(path: str | Path) -> list[PackageDetails]:
    """Parse a ``yarn.lock`` file.

    Args:
        path: Filesystem path to the lockfile.

    Returns:
        List of resolved packages, sorted by name.

    Raises:
        LockfileReadError: If the file cannot be read.
        LockfileDecodeError: If the file is not valid UTF-8 text.
    """
    try:
        text = Path(path).read_text(encoding="utf-8-sig")
    except UnicodeDecodeError as exc:
        raise LockfileDecodeError(str(path), "could not decode") from exc
    except OSError as exc:
        raise LockfileReadError(str(path), "could not open") from exc
    return parse_yarn_lock_text(text)
