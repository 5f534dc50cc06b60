"""Shared test fixtures."""

from pathlib import Path

import pytest
from docnav.config import (
    Config,
    DocsConfig,
    LinkConfig,
    NavigationConfig,
    SectionConfig,
    SidebarConfig,
    SiteConfig,
    ThemeConfig,
)
from docnav.core.registry import ContentRegistry


@pytest.fixture
def registry() -> ContentRegistry:
    """Registry with the guide and examples pages."""
    registry = ContentRegistry()
    registry.register("/guide/getting-started", "Getting Started")
    registry.register("/guide/installation", "Installation")
    registry.register("/examples/index", "Examples")
    return registry


@pytest.fixture
def navigation_config() -> NavigationConfig:
    """Navigation with a guide and an examples sidebar."""
    return NavigationConfig(
        sidebar=(
            SidebarConfig(
                prefix="/guide/",
                sections=(
                    SectionConfig(
                        text="Getting Started",
                        items=(
                            LinkConfig("Introduction", "/guide/getting-started"),
                            LinkConfig("Installation", "/guide/installation"),
                        ),
                    ),
                ),
            ),
            SidebarConfig(
                prefix="/examples/",
                sections=(
                    SectionConfig(
                        text="Examples",
                        items=(LinkConfig("Overview", "/examples/index"),),
                    ),
                ),
            ),
        ),
    )


@pytest.fixture
def docs_dir(tmp_path: Path) -> Path:
    """Create docs directory with guide and examples pages."""
    docs = tmp_path / "docs"
    guide = docs / "guide"
    guide.mkdir(parents=True)
    (guide / "getting-started.md").write_text("# Getting Started\n\nIntro.")
    (guide / "installation.md").write_text("# Installation\n\nSteps.")
    examples = docs / "examples"
    examples.mkdir()
    (examples / "index.md").write_text("# Examples\n\nOverview.")
    return docs


@pytest.fixture
def test_config(docs_dir: Path, navigation_config: NavigationConfig) -> Config:
    """Create a test configuration pointing at docs_dir."""
    return Config(
        site=SiteConfig(title="Test Docs"),
        docs=DocsConfig(
            source_dir=docs_dir,
            manifest=docs_dir.parent / "site.json",
        ),
        theme=ThemeConfig(),
        navigation=navigation_config,
    )


CONFIG_TOML = """
[site]
title = "Test Docs"

[docs]
source_dir = "docs"

[[nav]]
text = "Guide"
link = "/guide/getting-started"

[[nav]]
text = "More"
items = [{ text = "Changelog", link = "https://example.com/CHANGELOG.md" }]

[[sidebar."/guide/"]]
text = "Getting Started"
items = [
    { text = "Introduction", link = "/guide/getting-started" },
    { text = "Installation", link = "/guide/installation" },
]

[[sidebar."/examples/"]]
text = "Examples"
items = [{ text = "Overview", link = "/examples/" }]
"""


@pytest.fixture
def config_file(tmp_path: Path, docs_dir: Path) -> Path:
    """Write docnav.toml next to docs_dir."""
    path = tmp_path / "docnav.toml"
    path.write_text(CONFIG_TOML)
    return path
