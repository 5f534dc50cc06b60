"""Content sources for populating the registry.

A content source only answers which page paths exist and what their titles
are. The registry does not know whether paths came from a filesystem scan,
a generated index or anything else.
"""

import logging
import re
from abc import ABC, abstractmethod
from collections.abc import Mapping
from pathlib import Path

from docnav.core.errors import SourceReadError
from docnav.core.types import URLPath, normalize_path

logger = logging.getLogger(__name__)

_FRONT_MATTER_RE = re.compile(r"\A---\r?\n(.*?)\r?\n---\r?\n", re.DOTALL)
_FRONT_MATTER_TITLE_RE = re.compile(r"^title:[ \t]*(.*?)[ \t]*$", re.MULTILINE)
_H1_RE = re.compile(r"^#[ \t]+(.+?)(?:[ \t]+#+)?[ \t]*$", re.MULTILINE)


class ContentSource(ABC):
    """Capability listing content paths and their titles."""

    @abstractmethod
    def list_paths(self) -> set[str]:
        """Return all content paths provided by this source."""

    @abstractmethod
    def title_of(self, path: str) -> str:
        """Return the display title for a path returned by list_paths()."""

    def source_of(self, path: str) -> Path | None:
        """Return the relative source file for a path, if known."""
        return None


class MappingContentSource(ContentSource):
    """In-memory content source backed by a path to title mapping."""

    def __init__(self, titles: Mapping[str, str]) -> None:
        self._titles = {normalize_path(path): title for path, title in titles.items()}

    def list_paths(self) -> set[str]:
        return set(self._titles)

    def title_of(self, path: str) -> str:
        return self._titles[normalize_path(path)]


class DirectoryContentSource(ContentSource):
    """Content source scanning a directory of markdown files.

    Each ``*.md`` file becomes one page. ``guide/intro.md`` maps to
    ``/guide/intro`` and ``examples/index.md`` maps to ``/examples/index``.
    Files and directories starting with "." or "_" are skipped (partials,
    generator configuration, hidden files).
    """

    def __init__(self, source_dir: Path) -> None:
        """Initialize source.

        Args:
            source_dir: Root directory containing markdown sources
        """
        self._source_dir = source_dir
        self._files: dict[URLPath, Path] | None = None
        self._titles: dict[URLPath, str] = {}

    @property
    def source_dir(self) -> Path:
        """Root directory containing markdown sources."""
        return self._source_dir

    def list_paths(self) -> set[str]:
        return set(self._scan())

    def title_of(self, path: str) -> str:
        normalized = normalize_path(path)
        title = self._titles.get(normalized)
        if title is None:
            source_path = self._scan()[normalized]
            title = _read_title(self._source_dir / source_path)
            self._titles[normalized] = title
        return title

    def source_of(self, path: str) -> Path | None:
        return self._scan().get(normalize_path(path))

    def _scan(self) -> dict[URLPath, Path]:
        if self._files is not None:
            return self._files

        files: dict[URLPath, Path] = {}
        if not self._source_dir.is_dir():
            logger.warning(f"Source directory does not exist: {self._source_dir}")
            self._files = files
            return files

        for file_path in sorted(self._source_dir.rglob("*.md")):
            relative = file_path.relative_to(self._source_dir)
            if any(part.startswith((".", "_")) for part in relative.parts):
                logger.debug(f"Skipping {relative}")
                continue
            url_path = URLPath(f"/{relative.with_suffix('').as_posix()}")
            files[url_path] = relative

        logger.debug(f"Found {len(files)} markdown files in {self._source_dir}")
        self._files = files
        return files


def _read_title(file_path: Path) -> str:
    """Extract page title from front matter, first H1 or file name."""
    try:
        text = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SourceReadError(str(file_path), str(e)) from e

    front_matter = _FRONT_MATTER_RE.match(text)
    if front_matter is not None:
        match = _FRONT_MATTER_TITLE_RE.search(front_matter.group(1))
        title = match.group(1).strip("\"'").strip() if match is not None else ""
        if title:
            return title
        text = text[front_matter.end() :]

    match = _H1_RE.search(text)
    if match is not None:
        return match.group(1)

    stem = file_path.stem
    if stem == "index":
        stem = file_path.parent.name
    return _humanize(stem)


def _humanize(name: str) -> str:
    """Convert file name to title ("setup-guide" -> "Setup Guide")."""
    return " ".join(word.capitalize() for word in re.split(r"[-_\s]+", name) if word)
