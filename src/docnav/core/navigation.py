"""Navigation tree builder.

Builds the per-prefix sidebars and the navigation bar from configuration
and validates every link against the content registry. Navigation is a view
layer over the registry: it references pages by path and never owns them.
"""

import logging
import re
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import NamedTuple, TypedDict

from docnav.config import (
    LinkConfig,
    NavigationConfig,
    NavItemConfig,
    SectionConfig,
    SidebarConfig,
)
from docnav.core.errors import (
    BrokenLinkError,
    DuplicateSectionError,
    NavigationError,
    OffendingEntry,
    OverlappingPrefixError,
)
from docnav.core.links import (
    ExternalTarget,
    InternalTarget,
    LinkTarget,
    classify_target,
    is_well_formed_url,
)
from docnav.core.registry import ContentRegistry
from docnav.core.types import RoutePrefix, URLPath, normalize_path, normalize_prefix

logger = logging.getLogger(__name__)

_SLUG_RE = re.compile(r"[^\w]+")


class NavEntryDict(TypedDict):
    """Dictionary representation of a navigation entry."""

    label: str
    link: str
    external: bool


class NavSectionDict(TypedDict):
    """Dictionary representation of a sidebar section."""

    id: str
    label: str
    entries: list[NavEntryDict]


class SidebarDict(TypedDict):
    """Dictionary representation of a sidebar."""

    prefix: str
    sections: list[NavSectionDict]


class NavBarItemDict(TypedDict, total=False):
    """Dictionary representation of a navigation bar item."""

    label: str
    link: str
    external: bool
    items: list[NavEntryDict]


class NavigationTreeDict(TypedDict):
    """Dictionary representation of the navigation tree."""

    nav: list[NavBarItemDict]
    sidebars: list[SidebarDict]


@dataclass(frozen=True)
class NavigationEntry:
    """One link within a section."""

    label: str
    target: LinkTarget

    @property
    def internal_path(self) -> URLPath | None:
        """Target path for internal links, None for external ones."""
        if isinstance(self.target, InternalTarget):
            return self.target.path
        return None

    def to_dict(self) -> NavEntryDict:
        """Convert to dictionary for JSON serialization."""
        return {
            "label": self.label,
            "link": self.target.href,
            "external": isinstance(self.target, ExternalTarget),
        }


@dataclass(frozen=True)
class NavigationSection:
    """Labeled, ordered group of links shown in a sidebar."""

    section_id: str
    label: str
    entries: tuple[NavigationEntry, ...] = ()

    def to_dict(self) -> NavSectionDict:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.section_id,
            "label": self.label,
            "entries": [entry.to_dict() for entry in self.entries],
        }


@dataclass(frozen=True)
class Sidebar:
    """Sections shown for every page under a route prefix."""

    prefix: RoutePrefix
    sections: tuple[NavigationSection, ...] = ()

    def matches(self, path: str) -> bool:
        """Check whether the prefix applies to a page path.

        "/guide" matches the "/guide/" prefix as well as "/guide/intro".
        """
        normalized = normalize_path(path)
        return normalized.startswith(self.prefix) or f"{normalized}/" == self.prefix

    def to_dict(self) -> SidebarDict:
        """Convert to dictionary for JSON serialization."""
        return {
            "prefix": self.prefix,
            "sections": [section.to_dict() for section in self.sections],
        }


@dataclass(frozen=True)
class NavBarItem:
    """Navigation bar item: a single link or a dropdown of links."""

    label: str
    target: LinkTarget | None = None
    items: tuple[NavigationEntry, ...] = ()

    def to_dict(self) -> NavBarItemDict:
        """Convert to dictionary for JSON serialization."""
        result: NavBarItemDict = {"label": self.label}
        if self.target is not None:
            result["link"] = self.target.href
            result["external"] = isinstance(self.target, ExternalTarget)
        if self.items:
            result["items"] = [item.to_dict() for item in self.items]
        return result


class FlatEntry(NamedTuple):
    """Entry together with its owning prefix and section."""

    prefix: RoutePrefix
    section: NavigationSection
    entry: NavigationEntry


class FlatEntries:
    """Restartable view over all sidebar entries in declaration order.

    Every iteration walks the tree again, so the view can be consumed once
    for rendering and again for link checks.
    """

    __slots__ = ("_sidebars",)

    def __init__(self, sidebars: tuple[Sidebar, ...]) -> None:
        self._sidebars = sidebars

    def __iter__(self) -> Iterator[FlatEntry]:
        for sidebar in self._sidebars:
            for section in sidebar.sections:
                for entry in section.entries:
                    yield FlatEntry(sidebar.prefix, section, entry)


@dataclass(frozen=True)
class NavigationTree:
    """Validated mapping from route prefixes to sidebars, plus the nav bar.

    Read-only once built; safe to share between renderer threads.
    """

    sidebars: tuple[Sidebar, ...] = ()
    nav: tuple[NavBarItem, ...] = ()

    @property
    def prefixes(self) -> list[RoutePrefix]:
        """Route prefixes in declaration order."""
        return [sidebar.prefix for sidebar in self.sidebars]

    def get_sidebar(self, prefix: str) -> Sidebar | None:
        """Get sidebar by exact prefix."""
        normalized = normalize_prefix(prefix)
        for sidebar in self.sidebars:
            if sidebar.prefix == normalized:
                return sidebar
        return None

    def get_section(self, section_id: str) -> NavigationSection | None:
        """Get section by id."""
        for sidebar in self.sidebars:
            for section in sidebar.sections:
                if section.section_id == section_id:
                    return section
        return None

    def resolve_active_section(self, current_path: str) -> Sidebar | None:
        """Select the sidebar for the page being rendered.

        The longest matching prefix wins. Equal-length matches keep the
        first declared sidebar.

        Args:
            current_path: Path of the page being rendered

        Returns:
            Matching Sidebar, or None when the page has no sidebar
        """
        path = current_path.split("#", 1)[0].split("?", 1)[0]
        best: Sidebar | None = None
        for sidebar in self.sidebars:
            if not sidebar.matches(path):
                continue
            if best is None or len(sidebar.prefix) > len(best.prefix):
                best = sidebar
        return best

    def flatten(self) -> FlatEntries:
        """All (prefix, section, entry) triples in declaration order."""
        return FlatEntries(self.sidebars)

    def to_dict(self) -> NavigationTreeDict:
        """Convert to dictionary for JSON serialization."""
        return {
            "nav": [item.to_dict() for item in self.nav],
            "sidebars": [sidebar.to_dict() for sidebar in self.sidebars],
        }


@dataclass
class ValidationReport:
    """All problems found while validating navigation configuration."""

    overlapping_prefixes: list[OverlappingPrefixError] = field(default_factory=list)
    duplicate_sections: list[DuplicateSectionError] = field(default_factory=list)
    offending_entries: list[OffendingEntry] = field(default_factory=list)
    link_count: int = 0

    @property
    def ok(self) -> bool:
        return not self.errors()

    def errors(self) -> list[NavigationError]:
        """Every problem as an exception instance, configuration errors first."""
        errors: list[NavigationError] = [
            *self.overlapping_prefixes,
            *self.duplicate_sections,
        ]
        if self.offending_entries:
            errors.append(BrokenLinkError(self.offending_entries))
        return errors

    def raise_for_errors(self) -> None:
        """Raise the first error, if any.

        Raises:
            OverlappingPrefixError: If two prefixes overlap
            DuplicateSectionError: If a section id is used twice
            BrokenLinkError: If any entry does not resolve (lists all of them)
        """
        errors = self.errors()
        if errors:
            raise errors[0]


class NavigationTreeBuilder:
    """Builder for constructing NavigationTree instances.

    Collects every problem instead of stopping at the first one. The
    registry is only read.
    """

    def __init__(self, registry: ContentRegistry) -> None:
        self._registry = registry
        self._sidebars: list[Sidebar] = []
        self._nav: list[NavBarItem] = []
        self._section_ids: set[str] = set()
        self._report = ValidationReport()
        self._offending: list[OffendingEntry] = []

    def add_sidebar(self, config: SidebarConfig) -> Sidebar:
        """Add a sidebar, checking its prefix against earlier ones.

        Args:
            config: Sidebar configuration

        Returns:
            The added Sidebar
        """
        prefix = normalize_prefix(config.prefix)
        for other in self._sidebars:
            if (
                prefix == other.prefix
                or prefix.startswith(other.prefix)
                or other.prefix.startswith(prefix)
            ):
                self._report.overlapping_prefixes.append(
                    OverlappingPrefixError(other.prefix, prefix)
                )

        sections = tuple(
            self._build_section(prefix, section) for section in config.sections
        )
        sidebar = Sidebar(prefix=prefix, sections=sections)
        self._sidebars.append(sidebar)
        return sidebar

    def add_nav_item(self, config: NavItemConfig) -> NavBarItem:
        """Add a navigation bar item.

        Args:
            config: Navigation bar item configuration

        Returns:
            The added NavBarItem
        """
        target: LinkTarget | None = None
        if config.link is not None:
            target = self._check_link(
                "", config.text, LinkConfig(text=config.text, link=config.link)
            )
        items = tuple(
            NavigationEntry(label=link.text, target=self._check_link("", config.text, link))
            for link in config.items
        )
        item = NavBarItem(label=config.text, target=target, items=items)
        self._nav.append(item)
        return item

    def report(self) -> ValidationReport:
        """Validation report with offending entries in deterministic order.

        Offending entries are sorted by prefix; the sort is stable, so
        entries under one prefix stay in declaration order.
        """
        self._report.offending_entries = sorted(
            self._offending, key=lambda entry: entry.prefix
        )
        return self._report

    def build(self) -> NavigationTree:
        """Build the NavigationTree instance.

        Raises:
            NavigationError: If validation found any problem
        """
        self.report().raise_for_errors()
        tree = NavigationTree(sidebars=tuple(self._sidebars), nav=tuple(self._nav))
        logger.info(
            f"Built navigation tree: {len(tree.sidebars)} sidebars, "
            f"{self._report.link_count} links"
        )
        return tree

    def _build_section(
        self,
        prefix: RoutePrefix,
        config: SectionConfig,
    ) -> NavigationSection:
        section_id = config.section_id or _section_slug(prefix, config.text)
        if section_id in self._section_ids:
            self._report.duplicate_sections.append(DuplicateSectionError(section_id))
        self._section_ids.add(section_id)

        entries = tuple(
            NavigationEntry(label=link.text, target=self._check_link(prefix, config.text, link))
            for link in config.items
        )
        return NavigationSection(section_id=section_id, label=config.text, entries=entries)

    def _check_link(self, prefix: str, section: str, link: LinkConfig) -> LinkTarget:
        """Classify a link and record it if it does not resolve."""
        self._report.link_count += 1
        target = classify_target(link.link)

        reason: str | None = None
        if isinstance(target, ExternalTarget):
            if not is_well_formed_url(target.url):
                reason = "malformed URL"
        elif not target.path:
            reason = "empty link"
        elif self._registry.resolve(target.path) is None:
            reason = "no such page"

        if reason is not None:
            logger.debug(f"Unresolved link {link.link!r} in {prefix or 'nav'}: {reason}")
            self._offending.append(
                OffendingEntry(
                    prefix=prefix,
                    section=section,
                    label=link.text,
                    target=link.link,
                    reason=reason,
                )
            )
        return target


def validate_navigation(
    config: NavigationConfig,
    registry: ContentRegistry,
) -> ValidationReport:
    """Validate navigation configuration without raising.

    Args:
        config: Navigation configuration
        registry: Content registry links are resolved against

    Returns:
        ValidationReport listing every problem found
    """
    return _populate(NavigationTreeBuilder(registry), config).report()


def build_navigation_tree(
    config: NavigationConfig,
    registry: ContentRegistry,
) -> NavigationTree:
    """Build a fully validated navigation tree.

    Args:
        config: Navigation configuration
        registry: Content registry links are resolved against

    Returns:
        Validated NavigationTree

    Raises:
        OverlappingPrefixError: If two prefixes are equal or nested
        DuplicateSectionError: If a section id is used twice
        BrokenLinkError: If any link does not resolve (all offenders listed)
    """
    return _populate(NavigationTreeBuilder(registry), config).build()


def resolve_active_section(tree: NavigationTree, current_path: str) -> Sidebar | None:
    """Select the sidebar for a page by longest-prefix match."""
    return tree.resolve_active_section(current_path)


def flatten(tree: NavigationTree) -> FlatEntries:
    """Restartable sequence of (prefix, section, entry) triples."""
    return tree.flatten()


def _populate(
    builder: NavigationTreeBuilder,
    config: NavigationConfig,
) -> NavigationTreeBuilder:
    for sidebar in config.sidebar:
        builder.add_sidebar(sidebar)
    for item in config.nav:
        builder.add_nav_item(item)
    return builder


def _section_slug(prefix: str, label: str) -> str:
    """Derive a section id ("/guide/", "Getting Started" -> "guide/getting-started")."""
    parts = [part for part in prefix.strip("/").split("/") if part]
    label_slug = _SLUG_RE.sub("-", label.lower()).strip("-") or "section"
    return "/".join([*parts, label_slug])
