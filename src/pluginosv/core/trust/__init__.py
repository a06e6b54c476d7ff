"""Trusted-package attribution.

Submodules:
    cache        -- TRUSTED_PACKAGES, build_cache, TrustedPackageCache
    attribution  -- attributed_to, all_attributions

All public names are re-exported here::

    from pluginosv.core.trust import TrustedPackageCache, attributed_to
"""

from pluginosv.core.trust.attribution import all_attributions, attributed_to
from pluginosv.core.trust.cache import (
    TRUSTED_PACKAGES,
    TrustedPackageCache,
    build_cache,
)

__all__ = [
    "TRUSTED_PACKAGES",
    "TrustedPackageCache",
    "all_attributions",
    "attributed_to",
    "build_cache",
]
