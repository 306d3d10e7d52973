"""Derive the package version from a release tag.

CI sets ``GITHUB_REF`` to ``refs/tags/v1.2.3`` when building a tag. The
``refs/tags/`` prefix is stripped and what remains must be exactly
``v<major>.<minor>.<patch>``; pre-release suffixes such as ``-beta`` are
rejected.
"""

from __future__ import annotations

import re

from provider_scripts.exceptions import InvalidVersionTagError

TAG_PREFIX = "refs/tags/"

_VERSION_TAG_RE = re.compile(r"v([0-9]+\.[0-9]+\.[0-9]+)")


def resolve_release_version(ref: str) -> str:
    """Return the version number encoded in a release tag or ref.

    Example::

        >>> resolve_release_version("refs/tags/v2.0.1")
        '2.0.1'

    Raises:
        InvalidVersionTagError: If the tag is not ``v<major>.<minor>.<patch>``.
    """
    tag = ref.removeprefix(TAG_PREFIX)
    match = _VERSION_TAG_RE.fullmatch(tag)
    if match is None:
        raise InvalidVersionTagError(f"Invalid version tag: {tag}")
    return match.group(1)
