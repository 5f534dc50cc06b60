"""Configuration management for Docnav.

Supports TOML configuration format with auto-discovery. The loaded
configuration is immutable and passed explicitly to whatever needs it.
"""

import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Self

from docnav.core.links import is_external, is_well_formed_url

CONFIG_FILENAME = "docnav.toml"


class ConfigError(ValueError):
    """Configuration file is malformed."""


@dataclass(frozen=True)
class HeadTag:
    """Extra tag rendered into the page head."""

    tag: str
    attrs: dict[str, str] = field(default_factory=dict)

    def to_list(self) -> list[object]:
        """Convert to [tag, attrs] pair for JSON serialization."""
        return [self.tag, dict(self.attrs)]


@dataclass(frozen=True)
class SiteConfig:
    """Site metadata."""

    title: str = "Documentation"
    description: str = ""
    lang: str = "en"
    head: tuple[HeadTag, ...] = ()


@dataclass(frozen=True)
class DocsConfig:
    """Documentation sources configuration."""

    source_dir: Path = field(default_factory=lambda: Path("docs"))
    manifest: Path = field(default_factory=lambda: Path("site.json"))


@dataclass(frozen=True)
class SocialLink:
    """Icon link shown in the navigation bar."""

    icon: str
    link: str


@dataclass(frozen=True)
class FooterConfig:
    """Footer text."""

    message: str | None = None
    copyright: str | None = None


@dataclass(frozen=True)
class SearchConfig:
    """Search configuration passed through to the renderer."""

    provider: str = "local"
    detailed_view: bool = False


@dataclass(frozen=True)
class EditLinkConfig:
    """Edit link configuration.

    The pattern contains a ":path" placeholder replaced with the page
    source file path relative to the docs directory.
    """

    pattern: str
    text: str = "Edit this page"

    def url_for(self, source_path: Path) -> str:
        """Build edit URL for a source file."""
        return self.pattern.replace(":path", source_path.as_posix())


@dataclass(frozen=True)
class LastUpdatedConfig:
    """Last updated label."""

    text: str = "Last updated"


@dataclass(frozen=True)
class ThemeConfig:
    """Theme options passed through to the renderer."""

    logo: str | None = None
    social_links: tuple[SocialLink, ...] = ()
    footer: FooterConfig | None = None
    search: SearchConfig = field(default_factory=SearchConfig)
    edit_link: EditLinkConfig | None = None
    last_updated: LastUpdatedConfig | None = None


@dataclass(frozen=True)
class LinkConfig:
    """Configured link (label + target as written)."""

    text: str
    link: str


@dataclass(frozen=True)
class SectionConfig:
    """Configured sidebar section."""

    text: str
    items: tuple[LinkConfig, ...] = ()
    section_id: str | None = None


@dataclass(frozen=True)
class SidebarConfig:
    """Configured sidebar for one route prefix."""

    prefix: str
    sections: tuple[SectionConfig, ...] = ()


@dataclass(frozen=True)
class NavItemConfig:
    """Configured navigation bar item: a link or a dropdown of links."""

    text: str
    link: str | None = None
    items: tuple[LinkConfig, ...] = ()


@dataclass(frozen=True)
class NavigationConfig:
    """Navigation bar and per-prefix sidebars in declaration order."""

    nav: tuple[NavItemConfig, ...] = ()
    sidebar: tuple[SidebarConfig, ...] = ()


@dataclass(frozen=True)
class Config:
    """Application configuration."""

    site: SiteConfig
    docs: DocsConfig
    theme: ThemeConfig
    navigation: NavigationConfig
    config_path: Path | None = None

    @classmethod
    def load(cls, config_path: Path | None = None) -> Self:
        """Load configuration from file.

        If config_path is provided, loads from that file.
        Otherwise, searches for docnav.toml in current directory and parents.

        Args:
            config_path: Optional explicit path to config file

        Returns:
            Config instance with defaults for missing sections

        Raises:
            FileNotFoundError: If explicit config_path doesn't exist
            ConfigError: If configuration is invalid
        """
        if config_path is not None:
            if not config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {config_path}")
            return cls._load_from_file(config_path)

        discovered_path = cls._discover_config()
        if discovered_path is None:
            return cls._default()

        return cls._load_from_file(discovered_path)

    @classmethod
    def _discover_config(cls) -> Path | None:
        """Search for config file in current directory and parents."""
        current = Path.cwd()
        while True:
            candidate = current / CONFIG_FILENAME
            if candidate.exists():
                return candidate
            parent = current.parent
            if parent == current:
                return None
            current = parent

    @classmethod
    def _default(cls) -> Self:
        return cls(
            site=SiteConfig(),
            docs=DocsConfig(),
            theme=ThemeConfig(),
            navigation=NavigationConfig(),
        )

    @classmethod
    def _load_from_file(cls, path: Path) -> Self:
        """Load configuration from a specific file.

        Args:
            path: Path to TOML configuration file

        Returns:
            Config instance

        Raises:
            ConfigError: If configuration is invalid
        """
        try:
            with path.open("rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid TOML in {path}: {e}") from e

        return cls.from_dict(data, path.parent, config_path=path)

    @classmethod
    def from_dict(
        cls,
        data: object,
        config_dir: Path,
        *,
        config_path: Path | None = None,
    ) -> Self:
        """Build configuration from parsed TOML data.

        Args:
            data: Parsed configuration document
            config_dir: Directory relative paths are resolved against
            config_path: File the data was read from, if any

        Raises:
            ConfigError: If configuration is invalid
        """
        if not isinstance(data, dict):
            raise ConfigError("Configuration must be a dictionary")

        return cls(
            site=cls._parse_site(data.get("site")),
            docs=cls._parse_docs(data.get("docs"), config_dir),
            theme=cls._parse_theme(data.get("theme")),
            navigation=NavigationConfig(
                nav=cls._parse_nav(data.get("nav")),
                sidebar=cls._parse_sidebar(data.get("sidebar")),
            ),
            config_path=config_path,
        )

    @classmethod
    def _parse_site(cls, data: object) -> SiteConfig:
        if data is None:
            return SiteConfig()

        if not isinstance(data, dict):
            raise ConfigError("site section must be a dictionary")

        title = _get_str(data, "title", "site.title", "Documentation")
        description = _get_str(data, "description", "site.description", "")
        lang = _get_str(data, "lang", "site.lang", "en")

        head_raw = data.get("head", [])
        if not isinstance(head_raw, list):
            raise ConfigError("site.head must be a list")
        head: list[HeadTag] = []
        for i, item in enumerate(head_raw):
            key = f"site.head[{i}]"
            if not isinstance(item, list) or not item or len(item) > 2:
                raise ConfigError(f"{key} must be a [tag, attributes] list")
            tag = item[0]
            if not isinstance(tag, str):
                raise ConfigError(f"{key} tag must be a string")
            attrs = item[1] if len(item) == 2 else {}
            if not isinstance(attrs, dict) or not all(
                isinstance(v, str) for v in attrs.values()
            ):
                raise ConfigError(f"{key} attributes must be a table of strings")
            head.append(HeadTag(tag=tag, attrs=dict(attrs)))

        return SiteConfig(title=title, description=description, lang=lang, head=tuple(head))

    @classmethod
    def _parse_docs(cls, data: object, config_dir: Path) -> DocsConfig:
        """Parse docs configuration section.

        Args:
            data: Raw docs section data
            config_dir: Directory containing config file (for relative paths)

        Returns:
            DocsConfig instance
        """
        if data is None:
            return DocsConfig(
                source_dir=config_dir / "docs",
                manifest=config_dir / "site.json",
            )

        if not isinstance(data, dict):
            raise ConfigError("docs section must be a dictionary")

        source_dir = _get_str(data, "source_dir", "docs.source_dir", "docs")
        manifest = _get_str(data, "manifest", "docs.manifest", "site.json")

        return DocsConfig(
            source_dir=config_dir / source_dir,
            manifest=config_dir / manifest,
        )

    @classmethod
    def _parse_theme(cls, data: object) -> ThemeConfig:
        """Parse theme configuration section.

        Args:
            data: Raw theme section data

        Returns:
            ThemeConfig instance
        """
        if data is None:
            return ThemeConfig()

        if not isinstance(data, dict):
            raise ConfigError("theme section must be a dictionary")

        logo = _get_optional_str(data, "logo", "theme.logo")

        social_raw = data.get("social_links", [])
        if not isinstance(social_raw, list):
            raise ConfigError("theme.social_links must be a list")
        social_links: list[SocialLink] = []
        for i, item in enumerate(social_raw):
            key = f"theme.social_links[{i}]"
            if not isinstance(item, dict):
                raise ConfigError(f"{key} must be a dictionary")
            icon = _require_str(item, "icon", f"{key}.icon")
            link = _require_str(item, "link", f"{key}.link")
            if not is_external(link) or not is_well_formed_url(link):
                raise ConfigError(f"{key}.link must be an absolute URL: {link}")
            social_links.append(SocialLink(icon=icon, link=link))

        footer: FooterConfig | None = None
        footer_raw = data.get("footer")
        if footer_raw is not None:
            if not isinstance(footer_raw, dict):
                raise ConfigError("theme.footer must be a dictionary")
            footer = FooterConfig(
                message=_get_optional_str(footer_raw, "message", "theme.footer.message"),
                copyright=_get_optional_str(
                    footer_raw, "copyright", "theme.footer.copyright"
                ),
            )

        search = SearchConfig()
        search_raw = data.get("search")
        if search_raw is not None:
            if not isinstance(search_raw, dict):
                raise ConfigError("theme.search must be a dictionary")
            detailed_view = search_raw.get("detailed_view", False)
            if not isinstance(detailed_view, bool):
                raise ConfigError("theme.search.detailed_view must be a boolean")
            search = SearchConfig(
                provider=_get_str(search_raw, "provider", "theme.search.provider", "local"),
                detailed_view=detailed_view,
            )

        edit_link: EditLinkConfig | None = None
        edit_raw = data.get("edit_link")
        if edit_raw is not None:
            if not isinstance(edit_raw, dict):
                raise ConfigError("theme.edit_link must be a dictionary")
            pattern = _require_str(edit_raw, "pattern", "theme.edit_link.pattern")
            if ":path" not in pattern:
                raise ConfigError("theme.edit_link.pattern must contain :path")
            edit_link = EditLinkConfig(
                pattern=pattern,
                text=_get_str(edit_raw, "text", "theme.edit_link.text", "Edit this page"),
            )

        last_updated: LastUpdatedConfig | None = None
        last_updated_raw = data.get("last_updated")
        if last_updated_raw is not None:
            if not isinstance(last_updated_raw, dict):
                raise ConfigError("theme.last_updated must be a dictionary")
            last_updated = LastUpdatedConfig(
                text=_get_str(
                    last_updated_raw, "text", "theme.last_updated.text", "Last updated"
                ),
            )

        return ThemeConfig(
            logo=logo,
            social_links=tuple(social_links),
            footer=footer,
            search=search,
            edit_link=edit_link,
            last_updated=last_updated,
        )

    @classmethod
    def _parse_nav(cls, data: object) -> tuple[NavItemConfig, ...]:
        """Parse navigation bar items.

        Each item has either a link or a list of dropdown items, not both.
        """
        if data is None:
            return ()

        if not isinstance(data, list):
            raise ConfigError("nav must be a list")

        items: list[NavItemConfig] = []
        for i, item in enumerate(data):
            key = f"nav[{i}]"
            if not isinstance(item, dict):
                raise ConfigError(f"{key} must be a dictionary")
            text = _require_str(item, "text", f"{key}.text")
            link = _get_optional_str(item, "link", f"{key}.link")
            children = item.get("items")
            if (link is None) == (children is None):
                raise ConfigError(f"{key} must have exactly one of link or items")
            if children is None:
                items.append(NavItemConfig(text=text, link=link))
            else:
                items.append(
                    NavItemConfig(text=text, items=_parse_links(children, f"{key}.items"))
                )
        return tuple(items)

    @classmethod
    def _parse_sidebar(cls, data: object) -> tuple[SidebarConfig, ...]:
        """Parse per-prefix sidebars, keeping declaration order."""
        if data is None:
            return ()

        if not isinstance(data, dict):
            raise ConfigError("sidebar section must be a dictionary")

        sidebars: list[SidebarConfig] = []
        for prefix, sections_raw in data.items():
            key = f"sidebar.{prefix}"
            if not isinstance(sections_raw, list):
                raise ConfigError(f"{key} must be a list")
            sections: list[SectionConfig] = []
            for i, section in enumerate(sections_raw):
                section_key = f"{key}[{i}]"
                if not isinstance(section, dict):
                    raise ConfigError(f"{section_key} must be a dictionary")
                sections.append(
                    SectionConfig(
                        text=_require_str(section, "text", f"{section_key}.text"),
                        items=_parse_links(section.get("items", []), f"{section_key}.items"),
                        section_id=_get_optional_str(section, "id", f"{section_key}.id"),
                    )
                )
            sidebars.append(SidebarConfig(prefix=prefix, sections=tuple(sections)))
        return tuple(sidebars)

    def with_overrides(
        self,
        *,
        source_dir: Path | None = None,
        manifest: Path | None = None,
    ) -> Self:
        """Create a new Config with CLI overrides applied.

        Only non-None values override the existing config. The original
        Config is not modified.

        Args:
            source_dir: Override docs.source_dir
            manifest: Override docs.manifest

        Returns:
            New Config instance with overrides applied
        """
        docs = self.docs
        if source_dir is not None or manifest is not None:
            docs = replace(
                self.docs,
                source_dir=source_dir if source_dir is not None else self.docs.source_dir,
                manifest=manifest if manifest is not None else self.docs.manifest,
            )
        return replace(self, docs=docs)


def _parse_links(data: object, key: str) -> tuple[LinkConfig, ...]:
    if not isinstance(data, list):
        raise ConfigError(f"{key} must be a list")
    links: list[LinkConfig] = []
    for i, item in enumerate(data):
        item_key = f"{key}[{i}]"
        if not isinstance(item, dict):
            raise ConfigError(f"{item_key} must be a dictionary")
        links.append(
            LinkConfig(
                text=_require_str(item, "text", f"{item_key}.text"),
                link=_require_str(item, "link", f"{item_key}.link"),
            )
        )
    return tuple(links)


def _require_str(data: dict[str, object], name: str, key: str) -> str:
    value = data.get(name)
    if not isinstance(value, str):
        raise ConfigError(f"{key} must be a string")
    return value


def _get_str(data: dict[str, object], name: str, key: str, default: str) -> str:
    value = data.get(name, default)
    if not isinstance(value, str):
        raise ConfigError(f"{key} must be a string")
    return value


def _get_optional_str(data: dict[str, object], name: str, key: str) -> str | None:
    value = data.get(name)
    if value is not None and not isinstance(value, str):
        raise ConfigError(f"{key} must be a string")
    return value
