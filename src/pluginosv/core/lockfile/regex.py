"""Process-wide memo of compiled regular expressions.

Parsers compile the same small set of patterns on every call. The memo is
shared by every thread in the process, so reads and writes go through a lock.
"""

from __future__ import annotations

import re
import threading

_cache: dict[str, re.Pattern[str]] = {}
_lock = threading.Lock()


def cached_compile(pattern: str) -> re.Pattern[str]:
    """Return the compiled form of *pattern*, compiling it at most once.

    Args:
        pattern: Regular expression source.

    Returns:
        The compiled pattern.

    Raises:
        re.error: If *pattern* is not a valid regular expression.
    """
    with _lock:
        compiled = _cache.get(pattern)
        if compiled is None:
            compiled = re.compile(pattern)
            _cache[pattern] = compiled
        return compiled


def cache_size() -> int:
    """Return the number of memoized patterns."""
    with _lock:
        return len(_cache)
