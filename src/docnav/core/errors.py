"""Error taxonomy for content registration and navigation validation.

All errors are build-time failures. Navigation validation collects every
problem before raising so operators see the complete list at once.
"""

from dataclasses import dataclass


class DocnavError(Exception):
    """Base class for all docnav errors."""


class DuplicatePathError(DocnavError):
    """Content path is already registered."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Content path already registered: {path}")
        self.path = path


class RegistryFrozenError(DocnavError):
    """Registry was frozen and can no longer be modified."""


class InvalidContentError(DocnavError, ValueError):
    """Content unit has an empty path or title."""


class SourceReadError(DocnavError):
    """Content source file could not be read."""

    def __init__(self, source_path: str, reason: str) -> None:
        super().__init__(f"Cannot read {source_path}: {reason}")
        self.source_path = source_path


class NavigationError(DocnavError):
    """Base class for navigation validation failures."""


@dataclass(frozen=True)
class OffendingEntry:
    """Navigation link that failed validation.

    Attributes:
        prefix: Sidebar route prefix, empty for top navigation bar items
        section: Label of the owning section (or nav bar group)
        label: Link label as configured
        target: Link target as configured
        reason: Short description of the failure
    """

    prefix: str
    section: str
    label: str
    target: str
    reason: str

    def describe(self) -> str:
        """Human-readable one-line description."""
        location = self.prefix or "nav"
        return (
            f"{location} > {self.section} > {self.label}: "
            f"{self.target} ({self.reason})"
        )

    def to_dict(self) -> dict[str, str]:
        """Convert to dictionary for JSON serialization."""
        return {
            "prefix": self.prefix,
            "section": self.section,
            "label": self.label,
            "target": self.target,
            "reason": self.reason,
        }


class BrokenLinkError(NavigationError):
    """One or more navigation entries do not resolve."""

    def __init__(self, offending_entries: list[OffendingEntry]) -> None:
        self.offending_entries = offending_entries
        lines = [f"{len(offending_entries)} broken navigation link(s):"]
        lines.extend(f"  - {entry.describe()}" for entry in offending_entries)
        super().__init__("\n".join(lines))


class OverlappingPrefixError(NavigationError):
    """Two sidebar prefixes are equal or one is a proper prefix of the other."""

    def __init__(self, prefix_a: str, prefix_b: str) -> None:
        if prefix_a == prefix_b:
            message = f"Duplicate sidebar prefix: {prefix_a}"
        else:
            message = f"Overlapping sidebar prefixes: {prefix_a} and {prefix_b}"
        super().__init__(message)
        self.prefix_a = prefix_a
        self.prefix_b = prefix_b


class DuplicateSectionError(NavigationError):
    """Section id is used by more than one section."""

    def __init__(self, section_id: str) -> None:
        super().__init__(f"Duplicate section id: {section_id}")
        self.section_id = section_id
