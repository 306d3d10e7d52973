"""Tests for provider_scripts.build.version."""

from __future__ import annotations

import pytest

from provider_scripts.build.version import resolve_release_version
from provider_scripts.exceptions import InvalidVersionTagError


class TestResolveReleaseVersion:
    @pytest.mark.parametrize(
        ("ref", "expected"),
        [
            ("v2.0.1", "2.0.1"),
            ("refs/tags/v2.0.1", "2.0.1"),
            ("v0.0.0", "0.0.0"),
            ("v10.20.300", "10.20.300"),
        ],
    )
    def test_accepted(self, ref: str, expected: str) -> None:
        assert resolve_release_version(ref) == expected

    @pytest.mark.parametrize(
        "ref",
        [
            "v1.2",
            "1.2.3",
            "v1.2.3-beta",
            "v1.2.3.4",
            "V1.2.3",
            "v1.2.3\n",
            " v1.2.3",
            "",
            "refs/heads/main",
            "refs/tags/1.2.3",
            "v١.٢.٣",
        ],
    )
    def test_rejected(self, ref: str) -> None:
        with pytest.raises(InvalidVersionTagError, match="Invalid version tag"):
            resolve_release_version(ref)

    def test_error_names_stripped_tag(self) -> None:
        with pytest.raises(InvalidVersionTagError) as exc_info:
            resolve_release_version("refs/tags/v1.2")
        assert str(exc_info.value) == "Invalid version tag: v1.2"
