"""Tests for configuration loading."""

from dataclasses import FrozenInstanceError
from pathlib import Path
from unittest.mock import patch

import pytest
from docnav.config import (
    Config,
    ConfigError,
    DocsConfig,
    EditLinkConfig,
    HeadTag,
    LinkConfig,
    NavItemConfig,
    SocialLink,
)


class TestConfigLoad:
    """Tests for Config.load()."""

    def test__explicit_path__loads_config(self, tmp_path: Path) -> None:
        """Load config from explicit path."""
        config_file = tmp_path / "docnav.toml"
        config_file.write_text("""
[site]
title = "PHP MCP SDK"
description = "Model Context Protocol implementation for PHP"
head = [
    ["link", { rel = "icon", href = "/favicon.ico" }],
    ["meta", { name = "theme-color", content = "#646cff" }],
]

[docs]
source_dir = "documentation"
manifest = "build/site.json"

[theme]
logo = "/images/logo.svg"
social_links = [{ icon = "github", link = "https://github.com/org/repo" }]
footer = { message = "Released under the MIT License.", copyright = "Copyright 2025" }
search = { provider = "local", detailed_view = true }
edit_link = { pattern = "https://github.com/org/repo/edit/main/docs/:path", text = "Edit on GitHub" }
last_updated = { text = "Updated" }

[[nav]]
text = "Guide"
link = "/guide/getting-started"

[[nav]]
text = "v1.0.0"
items = [{ text = "Changelog", link = "https://github.com/org/repo/CHANGELOG.md" }]

[[sidebar."/guide/"]]
text = "Getting Started"
id = "start"
items = [{ text = "Introduction", link = "/guide/getting-started" }]

[[sidebar."/guide/"]]
text = "Development"
items = []

[[sidebar."/api/"]]
text = "API Reference"
items = [{ text = "Overview", link = "/api/" }]
""")

        config = Config.load(config_file)

        assert config.config_path == config_file
        assert config.site.title == "PHP MCP SDK"
        assert config.site.head == (
            HeadTag("link", {"rel": "icon", "href": "/favicon.ico"}),
            HeadTag("meta", {"name": "theme-color", "content": "#646cff"}),
        )
        assert config.docs.source_dir == tmp_path / "documentation"
        assert config.docs.manifest == tmp_path / "build/site.json"
        assert config.theme.logo == "/images/logo.svg"
        assert config.theme.social_links == (
            SocialLink(icon="github", link="https://github.com/org/repo"),
        )
        assert config.theme.footer is not None
        assert config.theme.footer.message == "Released under the MIT License."
        assert config.theme.search.detailed_view is True
        assert config.theme.edit_link == EditLinkConfig(
            pattern="https://github.com/org/repo/edit/main/docs/:path",
            text="Edit on GitHub",
        )
        assert config.theme.last_updated is not None
        assert config.theme.last_updated.text == "Updated"

        nav = config.navigation.nav
        assert nav[0] == NavItemConfig(text="Guide", link="/guide/getting-started")
        assert nav[1].items == (
            LinkConfig("Changelog", "https://github.com/org/repo/CHANGELOG.md"),
        )

        sidebar = config.navigation.sidebar
        assert [s.prefix for s in sidebar] == ["/guide/", "/api/"]
        assert [s.text for s in sidebar[0].sections] == ["Getting Started", "Development"]
        assert sidebar[0].sections[0].section_id == "start"
        assert sidebar[0].sections[1].section_id is None
        assert sidebar[0].sections[0].items == (
            LinkConfig("Introduction", "/guide/getting-started"),
        )

    def test__explicit_path__not_found__raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            Config.load(tmp_path / "missing.toml")

    def test__empty_file__defaults(self, tmp_path: Path) -> None:
        """Empty file yields defaults relative to the config directory."""
        config_file = tmp_path / "docnav.toml"
        config_file.write_text("")

        config = Config.load(config_file)

        assert config.site.title == "Documentation"
        assert config.docs.source_dir == tmp_path / "docs"
        assert config.docs.manifest == tmp_path / "site.json"
        assert config.navigation.nav == ()
        assert config.navigation.sidebar == ()
        assert config.theme.edit_link is None

    def test__auto_discovery__finds_parent_config(self, tmp_path: Path) -> None:
        """Discover docnav.toml in a parent directory."""
        (tmp_path / "docnav.toml").write_text('[site]\ntitle = "Found"\n')
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)

        with patch("docnav.config.Path.cwd", return_value=nested):
            config = Config.load()

        assert config.site.title == "Found"
        assert config.config_path == tmp_path / "docnav.toml"

    def test__no_config_found__defaults(self, tmp_path: Path) -> None:
        with patch("docnav.config.Path.cwd", return_value=tmp_path):
            config = Config.load()

        assert config.config_path is None
        assert config.docs == DocsConfig()

    def test__invalid_toml__raises_config_error(self, tmp_path: Path) -> None:
        config_file = tmp_path / "docnav.toml"
        config_file.write_text("[site\ntitle = ")

        with pytest.raises(ConfigError, match="Invalid TOML"):
            Config.load(config_file)


class TestConfigValidation:
    """Tests for malformed configuration values."""

    @pytest.mark.parametrize(
        ("toml", "message"),
        [
            ("site = 1", "site section must be a dictionary"),
            ("[site]\ntitle = 1", "site.title must be a string"),
            ('[site]\nhead = ["link"]', r"site.head\[0\] must be a \[tag, attributes\] list"),
            ("[docs]\nsource_dir = 1", "docs.source_dir must be a string"),
            ("[theme]\nsocial_links = {}", "theme.social_links must be a list"),
            (
                '[theme]\nsocial_links = [{ icon = "github", link = "/github" }]',
                r"theme.social_links\[0\].link must be an absolute URL",
            ),
            (
                '[theme]\nedit_link = { pattern = "https://example.com/edit" }',
                "must contain :path",
            ),
            ('[theme]\nsearch = { detailed_view = "yes" }', "must be a boolean"),
            ('nav = [{ text = "Guide" }]', r"nav\[0\] must have exactly one of link or items"),
            (
                'nav = [{ text = "G", link = "/g", items = [] }]',
                r"nav\[0\] must have exactly one of link or items",
            ),
            ("sidebar = []", "sidebar section must be a dictionary"),
            ('[sidebar]\n"/guide/" = {}', "sidebar./guide/ must be a list"),
            (
                '[[sidebar."/guide/"]]\ntext = "Start"\nitems = [{ text = "Intro" }]',
                r"sidebar./guide/\[0\].items\[0\].link must be a string",
            ),
            (
                '[[sidebar."/guide/"]]\nitems = []',
                r"sidebar./guide/\[0\].text must be a string",
            ),
        ],
    )
    def test__malformed__raises(self, tmp_path: Path, toml: str, message: str) -> None:
        config_file = tmp_path / "docnav.toml"
        config_file.write_text(toml)

        with pytest.raises(ConfigError, match=message):
            Config.load(config_file)

    def test__config_error_is_value_error(self) -> None:
        assert issubclass(ConfigError, ValueError)


class TestConfigImmutability:
    """Tests for immutable configuration."""

    def test__frozen(self, tmp_path: Path) -> None:
        config_file = tmp_path / "docnav.toml"
        config_file.write_text("")
        config = Config.load(config_file)

        with pytest.raises(FrozenInstanceError):
            config.site = config.site  # type: ignore[misc]

    def test__with_overrides__returns_new_config(self, tmp_path: Path) -> None:
        """Apply CLI overrides without touching the original."""
        config_file = tmp_path / "docnav.toml"
        config_file.write_text("")
        config = Config.load(config_file)

        updated = config.with_overrides(
            source_dir=Path("/srv/docs"),
            manifest=Path("/srv/site.json"),
        )

        assert updated.docs.source_dir == Path("/srv/docs")
        assert updated.docs.manifest == Path("/srv/site.json")
        assert config.docs.source_dir == tmp_path / "docs"

    def test__with_overrides__none_keeps_values(self, tmp_path: Path) -> None:
        config_file = tmp_path / "docnav.toml"
        config_file.write_text("")
        config = Config.load(config_file)

        assert config.with_overrides() == config


class TestEditLink:
    """Tests for EditLinkConfig.url_for()."""

    def test__replaces_path_placeholder(self) -> None:
        edit_link = EditLinkConfig(pattern="https://github.com/org/repo/edit/main/docs/:path")

        url = edit_link.url_for(Path("guide/installation.md"))

        assert url == "https://github.com/org/repo/edit/main/docs/guide/installation.md"
