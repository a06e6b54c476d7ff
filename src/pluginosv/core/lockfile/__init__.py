"""JavaScript lockfile parsing into a normalized package list.

Three package managers, one output shape. Every parser returns a list of
``PackageDetails`` sorted by name, raising only for whole-file failures
(unreadable file, malformed top-level document). A corrupt individual record
is skipped.

Submodules:

- ``models``: ``Dependency``, ``PackageDetails``, ``Ecosystem``.
- ``regex``: Thread-safe memo of compiled patterns.
- ``commit``: VCS commit recovery from resolution URLs.
- ``yarn``, ``npm``, ``pnpm``: Format-specific parsers.
- ``registry``: Parser selection by lockfile base name.
"""

from pluginosv.core.lockfile.commit import try_extract_commit
from pluginosv.core.lockfile.models import Dependency, Ecosystem, PackageDetails
from pluginosv.core.lockfile.npm import parse_npm_lock
from pluginosv.core.lockfile.pnpm import parse_pnpm_lock
from pluginosv.core.lockfile.registry import LockfileParserRegistry, default_registry
from pluginosv.core.lockfile.yarn import parse_yarn_lock

__all__ = [
    "Dependency",
    "Ecosystem",
    "LockfileParserRegistry",
    "PackageDetails",
    "default_registry",
    "parse_npm_lock",
    "parse_pnpm_lock",
    "parse_yarn_lock",
    "try_extract_commit",
]
