"""Tests for link target classification."""

import pytest
from docnav.core.links import (
    ExternalTarget,
    InternalTarget,
    classify_target,
    is_well_formed_url,
)


class TestClassifyTarget:
    """Tests for classify_target()."""

    @pytest.mark.parametrize(
        "target",
        [
            "https://github.com/org/repo/blob/main/CHANGELOG.md",
            "http://example.com",
            "mailto:team@example.com",
            "//cdn.example.com/lib.js",
        ],
    )
    def test__external_forms(self, target: str) -> None:
        assert classify_target(target) == ExternalTarget(url=target)

    def test__absolute_path__internal(self) -> None:
        assert classify_target("/guide/intro") == InternalTarget(path="/guide/intro")

    def test__relative_path__normalized(self) -> None:
        assert classify_target("guide/intro") == InternalTarget(path="/guide/intro")

    def test__href(self) -> None:
        assert classify_target("/guide/").href == "/guide/"
        assert classify_target("https://x.io").href == "https://x.io"


class TestIsWellFormedUrl:
    """Tests for is_well_formed_url()."""

    @pytest.mark.parametrize(
        "url",
        [
            "https://github.com/org/repo",
            "http://localhost:8080/docs",
            "mailto:team@example.com",
            "//cdn.example.com/lib.js",
        ],
    )
    def test__valid(self, url: str) -> None:
        assert is_well_formed_url(url)

    @pytest.mark.parametrize(
        "url",
        [
            "https://",
            "http:/example.com",
            "https://exa mple.com",
            "mailto:",
            "http://example.com:notaport/",
            "",
        ],
    )
    def test__invalid(self, url: str) -> None:
        assert not is_well_formed_url(url)
