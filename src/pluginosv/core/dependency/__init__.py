"""Package graph traversal over parsed lockfiles.

- ``graph``: forward transitive closure (``expand``) with cycle safety.
- ``reverse``: reverse lookup of the packages that pull a name in.

All public names are re-exported here::

    from pluginosv.core.dependency import expand, included_by
"""

from pluginosv.core.dependency.graph import (
    DependencyState,
    PackageFlattened,
    deduplicate,
    deep_expand,
    direct_dependencies,
    expand,
    index_packages,
    lookup,
)
from pluginosv.core.dependency.reverse import included_by, reverse_index

__all__ = [
    "DependencyState",
    "PackageFlattened",
    "deduplicate",
    "deep_expand",
    "direct_dependencies",
    "expand",
    "included_by",
    "index_packages",
    "lookup",
    "reverse_index",
]
