"""Parser registry: selects a lockfile parser by base filename.

The validator hands this engine a single lockfile path. Its base name
(``yarn.lock``, ``package-lock.json``, ``pnpm-lock.yaml``, ...) decides which
parser applies. The ``default_registry()`` factory pre-registers all built-in
parsers; ``register()`` allows additional formats without touching the
filter.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from pluginosv.core.lockfile.models import PackageDetails
from pluginosv.core.lockfile.npm import parse_npm_lock
from pluginosv.core.lockfile.pnpm import parse_pnpm_lock
from pluginosv.core.lockfile.yarn import parse_yarn_lock
from pluginosv.exceptions import UnsupportedLockfileError

LockfileParser = Callable[[str | Path], list[PackageDetails]]


class LockfileParserRegistry:
    """Registry mapping lockfile base names to parser functions.

    Attributes:
        parsers: Mapping of base filename to parser.
    """

    def __init__(self) -> None:
        self.parsers: dict[str, LockfileParser] = {}

    def register(self, filename: str, parser: LockfileParser) -> None:
        """Register *parser* for lockfiles named *filename*.

        A later registration for the same name replaces the earlier one.
        """
        self.parsers[filename] = parser

    def supports(self, path: str | Path) -> bool:
        """Return True if a parser is registered for *path*'s base name."""
        return Path(path).name in self.parsers

    def parser_for(self, path: str | Path) -> LockfileParser:
        """Return the parser registered for *path*'s base name.

        Raises:
            UnsupportedLockfileError: If no parser matches.
        """
        parser = self.parsers.get(Path(path).name)
        if parser is None:
            raise UnsupportedLockfileError(str(path), "unsupported lockfile")
        return parser

    def parse(self, path: str | Path) -> list[PackageDetails]:
        """Parse *path* with the matching parser.

        Raises:
            UnsupportedLockfileError: If no parser matches.
            LockfileReadError: If the file cannot be read.
            LockfileDecodeError: If the file's structure is malformed.
        """
        return self.parser_for(path)(path)


def default_registry() -> LockfileParserRegistry:
    """Create a registry pre-loaded with the yarn, npm and pnpm parsers."""
    registry = LockfileParserRegistry()
    registry.register("yarn.lock", parse_yarn_lock)
    registry.register("package-lock.json", parse_npm_lock)
    registry.register("npm-shrinkwrap.json", parse_npm_lock)
    registry.register("pnpm-lock.yaml", parse_pnpm_lock)
    return registry
