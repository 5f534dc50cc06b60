"""Core type definitions."""

from typing import NewType

# URL path for routing (e.g., "/guide/installation")
# Distinct from filesystem Path to catch type mismatches
URLPath = NewType("URLPath", str)

# Sidebar route prefix, always with leading and trailing slash (e.g., "/guide/")
RoutePrefix = NewType("RoutePrefix", str)


def normalize_path(path: str) -> URLPath:
    """Normalize path to have leading slash."""
    return URLPath(path if path.startswith("/") else f"/{path}")


def normalize_prefix(prefix: str) -> RoutePrefix:
    """Normalize route prefix to have leading and trailing slash."""
    normalized = normalize_path(prefix)
    if not normalized.endswith("/"):
        normalized = URLPath(f"{normalized}/")
    return RoutePrefix(normalized)
