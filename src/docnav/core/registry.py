"""Content registry for documentation pages.

Holds every content unit of the site keyed by URL path. Navigation entries
reference content units by path only, so pages can be added or removed
independently of the navigation structure; validation catches the drift.
"""

import logging
from collections.abc import Iterator
from dataclasses import dataclass, replace
from pathlib import Path
from typing import TYPE_CHECKING, Self

from docnav.core.errors import DuplicatePathError, InvalidContentError, RegistryFrozenError
from docnav.core.sources import ContentSource
from docnav.core.types import URLPath, normalize_path

if TYPE_CHECKING:
    from docnav.core.navigation import NavigationTree

logger = logging.getLogger(__name__)

_PAGE_SUFFIXES = (".md", ".html")


@dataclass(frozen=True)
class ContentUnit:
    """Document page data."""

    path: URLPath
    title: str
    section_id: str | None = None
    source_path: Path | None = None

    def to_dict(self) -> dict[str, str | None]:
        """Convert to dictionary for JSON serialization."""
        return {
            "path": self.path,
            "title": self.title,
            "section_id": self.section_id,
            "source_path": self.source_path.as_posix() if self.source_path else None,
        }


class ContentRegistry:
    """Registry of content units with O(1) path lookups.

    Units keep their registration order. Once frozen, the registry is
    read-only and can be shared between any number of readers.
    """

    __slots__ = ("_frozen", "_units")

    def __init__(self) -> None:
        self._units: dict[URLPath, ContentUnit] = {}
        self._frozen = False

    @classmethod
    def from_source(cls, source: ContentSource) -> Self:
        """Build a registry from a content source.

        Paths are registered in sorted order so that the result does not
        depend on how the source discovered them.

        Args:
            source: Content source to read paths and titles from

        Returns:
            New, unfrozen registry

        Raises:
            DuplicatePathError: If two source paths normalize to the same path
        """
        registry = cls()
        for path in sorted(source.list_paths()):
            registry.register(
                path,
                source.title_of(path),
                source_path=source.source_of(path),
            )
        logger.info(f"Registered {len(registry)} content units")
        return registry

    @property
    def frozen(self) -> bool:
        """Whether the registry rejects further modification."""
        return self._frozen

    def register(
        self,
        path: str,
        title: str,
        *,
        source_path: Path | None = None,
    ) -> ContentUnit:
        """Register a new content unit.

        Args:
            path: Page path (e.g., "guide/intro" or "/guide/intro")
            title: Display title

        Returns:
            The created ContentUnit

        Raises:
            InvalidContentError: If path or title is empty
            DuplicatePathError: If path is already registered
            RegistryFrozenError: If the registry is frozen
        """
        self._check_mutable()
        if not path or path == "/":
            raise InvalidContentError("Content path must not be empty")
        if not title:
            raise InvalidContentError(f"Content title must not be empty: {path}")

        normalized = _content_key(path)
        if normalized in self._units:
            raise DuplicatePathError(normalized)

        unit = ContentUnit(path=normalized, title=title, source_path=source_path)
        self._units[normalized] = unit
        logger.debug(f"Registered content {normalized}")
        return unit

    def retitle(self, path: str, title: str) -> ContentUnit:
        """Change the title of a registered unit.

        Raises:
            KeyError: If path is not registered
            RegistryFrozenError: If the registry is frozen
        """
        self._check_mutable()
        if not title:
            raise InvalidContentError(f"Content title must not be empty: {path}")
        normalized = _content_key(path)
        unit = replace(self._units[normalized], title=title)
        self._units[normalized] = unit
        return unit

    def remove(self, path: str) -> None:
        """Remove a unit whose source was deleted.

        Raises:
            KeyError: If path is not registered
            RegistryFrozenError: If the registry is frozen
        """
        self._check_mutable()
        del self._units[_content_key(path)]

    def freeze(self) -> Self:
        """Make the registry read-only and return it."""
        self._frozen = True
        return self

    def get(self, path: str) -> ContentUnit | None:
        """Get unit by exact path.

        Args:
            path: Page path (e.g., "guide/intro" or "/guide/intro")

        Returns:
            ContentUnit if found, None otherwise
        """
        return self._units.get(_content_key(path))

    def resolve(self, target: str) -> ContentUnit | None:
        """Resolve a link target to a content unit.

        Query strings and fragments are ignored, a trailing ".md" or ".html"
        is dropped and a trailing slash resolves to the directory index page.

        Args:
            target: Internal link target (e.g., "/examples/", "/guide/intro.md#setup")

        Returns:
            ContentUnit if the target resolves, None otherwise
        """
        path = target.split("#", 1)[0].split("?", 1)[0]
        if not path:
            return None
        normalized = _content_key(path)
        for suffix in _PAGE_SUFFIXES:
            if normalized.endswith(suffix):
                normalized = URLPath(normalized.removesuffix(suffix))
                break
        return self._units.get(normalized)

    def with_sections(self, tree: "NavigationTree") -> "ContentRegistry":
        """Return a frozen copy whose units reference their sections.

        The first section (in declaration order) linking to a unit owns it.
        This registry is left unchanged.

        Args:
            tree: Validated navigation tree built against this registry

        Returns:
            New frozen registry with section_id populated
        """
        owners: dict[URLPath, str] = {}
        for item in tree.flatten():
            target = item.entry.internal_path
            if target is None:
                continue
            unit = self.resolve(target)
            if unit is not None and unit.path not in owners:
                owners[unit.path] = item.section.section_id

        bound = ContentRegistry()
        for path, unit in self._units.items():
            bound._units[path] = replace(unit, section_id=owners.get(path))
        return bound.freeze()

    def __contains__(self, path: object) -> bool:
        return isinstance(path, str) and _content_key(path) in self._units

    def __iter__(self) -> Iterator[ContentUnit]:
        return iter(list(self._units.values()))

    def __len__(self) -> int:
        return len(self._units)

    def _check_mutable(self) -> None:
        if self._frozen:
            raise RegistryFrozenError("Content registry is frozen")


def _content_key(path: str) -> URLPath:
    """Normalize a content path; a directory path names its index page."""
    normalized = normalize_path(path)
    if normalized.endswith("/"):
        return URLPath(f"{normalized}index")
    return normalized
