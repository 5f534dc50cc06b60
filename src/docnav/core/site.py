"""Site model loading.

Combines configuration, the content registry and the navigation tree into
one read-only model handed to the renderer.
"""

import logging
from dataclasses import dataclass

from docnav.config import Config
from docnav.core.navigation import (
    NavigationTree,
    ValidationReport,
    build_navigation_tree,
    validate_navigation,
)
from docnav.core.registry import ContentRegistry
from docnav.core.sources import ContentSource, DirectoryContentSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SiteModel:
    """Validated site: configuration, content and navigation."""

    config: Config
    registry: ContentRegistry
    tree: NavigationTree


class SiteLoader:
    """Loads and validates the site model.

    The loaded model is cached until invalidate() is called, e.g. after
    content files change.
    """

    def __init__(self, config: Config, source: ContentSource | None = None) -> None:
        """Initialize loader.

        Args:
            config: Application configuration
            source: Content source, defaults to scanning docs.source_dir
        """
        self._config = config
        self._source = source
        self._cached: SiteModel | None = None

    @property
    def config(self) -> Config:
        return self._config

    def load_registry(self) -> ContentRegistry:
        """Register all content from the source and freeze the registry.

        Raises:
            DuplicatePathError: If the source yields the same path twice
        """
        source = self._source or DirectoryContentSource(self._config.docs.source_dir)
        return ContentRegistry.from_source(source).freeze()

    def validate(self) -> tuple[ContentRegistry, ValidationReport]:
        """Load content and validate navigation without raising.

        Returns:
            Frozen registry and the validation report
        """
        registry = self.load_registry()
        report = validate_navigation(self._config.navigation, registry)
        if report.ok:
            logger.info(f"Validated {report.link_count} navigation links")
        else:
            logger.warning(
                f"Navigation validation failed with {len(report.errors())} error(s)"
            )
        return registry, report

    def load(self, *, use_cache: bool = True) -> SiteModel:
        """Load the validated site model.

        Args:
            use_cache: Whether to reuse a previously loaded model

        Returns:
            SiteModel with section ids bound on every content unit

        Raises:
            DuplicatePathError: If the source yields the same path twice
            NavigationError: If navigation validation fails
        """
        if use_cache and self._cached is not None:
            return self._cached

        registry = self.load_registry()
        tree = build_navigation_tree(self._config.navigation, registry)
        model = SiteModel(
            config=self._config,
            registry=registry.with_sections(tree),
            tree=tree,
        )
        self._cached = model
        return model

    def invalidate(self) -> None:
        """Drop the cached model."""
        self._cached = None
