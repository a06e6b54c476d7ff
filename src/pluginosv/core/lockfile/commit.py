"""Commit extraction from resolution URLs and version strings.

A package pinned to a VCS ref has no meaningful registry version; its
identity is the commit. Lockfiles encode that ref in many shapes:

- ``git://``, ``ssh://``, ``git+ssh://``, ``git+https://`` URLs with a
  ``#<ref>`` fragment
- ``https://host/owner/repo.git#<ref>``
- ``https://codeload.github.com/owner/repo/tar.gz/<ref>`` tarballs
- ``...#commit=<ref>`` / ``...#commit:<ref>``
- ``github:`` / ``gitlab:`` / ``bitbucket:`` shorthand
- GitHub, GitLab or Bitbucket URLs carrying ``?ref=<ref>`` or ``#<ref>``
"""

from __future__ import annotations

from urllib.parse import parse_qs, urlsplit

from pluginosv.core.lockfile.regex import cached_compile

_COMMIT_PATTERNS: tuple[str, ...] = (
    r"(?:^|.+@)(?:git(?:\+(?:ssh|https))?|ssh)://.+#(\w+)$",
    r"(?:^|.+@)https://.+\.git#(\w+)$",
    r"https://codeload\.github\.com(?:/[\w.-]+){2}/tar\.gz/(\w+)$",
    r".+#commit[:=](\w+)$",
    r"^(?:github|gitlab|bitbucket):.+#(\w+)$",
)

CODELOAD_TARBALL_PATTERN = _COMMIT_PATTERNS[2]

_GIT_REPO_HOSTS: frozenset[str] = frozenset({
    "bitbucket.org",
    "github.com",
    "gitlab.com",
})


def try_extract_commit(resolution: str) -> str:
    """Recover a VCS commit from a resolution URL or version string.

    Args:
        resolution: The ``resolved``/``resolution`` URL or a version string.

    Returns:
        The commit or ref, or an empty string when none is encoded.
    """
    if not resolution:
        return ""

    for pattern in _COMMIT_PATTERNS:
        matched = cached_compile(pattern).search(resolution)
        if matched is not None:
            return matched.group(1)

    try:
        parts = urlsplit(resolution)
    except ValueError:
        return ""

    if parts.hostname not in _GIT_REPO_HOSTS:
        return ""

    refs = parse_qs(parts.query).get("ref")
    if refs:
        return refs[0]
    return parts.fragment
