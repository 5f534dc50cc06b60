"""Link target classification.

A navigation link either points at a page of the site (internal, resolved
against the content registry) or at an absolute external URL (checked for
well-formedness only).
"""

import re
from dataclasses import dataclass
from urllib.parse import urlsplit

from docnav.core.types import URLPath, normalize_path

_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*:")

# Schemes that need a host component to be usable
_HOST_SCHEMES = frozenset({"http", "https", "ftp", "ftps", "ws", "wss"})


@dataclass(frozen=True)
class InternalTarget:
    """Link to a page of the site."""

    path: URLPath

    @property
    def href(self) -> str:
        return self.path


@dataclass(frozen=True)
class ExternalTarget:
    """Link to an absolute external URL."""

    url: str

    @property
    def href(self) -> str:
        return self.url


LinkTarget = InternalTarget | ExternalTarget


def is_external(target: str) -> bool:
    """Check whether a target is written as an external URL.

    Anything with a URL scheme ("https:", "mailto:") or a protocol-relative
    "//" start is external. Everything else is a logical site path.
    """
    return target.startswith("//") or _SCHEME_RE.match(target) is not None


def classify_target(target: str) -> LinkTarget:
    """Classify a configured link target by its syntactic form."""
    if is_external(target):
        return ExternalTarget(url=target)
    if not target:
        return InternalTarget(path=URLPath(""))
    return InternalTarget(path=normalize_path(target))


def is_well_formed_url(url: str) -> bool:
    """Check that an external URL can be used as a link.

    Args:
        url: URL with a scheme or a protocol-relative "//" start

    Returns:
        True if the URL has the parts its scheme needs
    """
    if not url or any(ch.isspace() for ch in url):
        return False
    try:
        parts = urlsplit(url)
        # Accessing port validates it
        _ = parts.port
    except ValueError:
        return False

    if url.startswith("//"):
        return bool(parts.hostname)
    if not parts.scheme:
        return False
    if parts.scheme.lower() in _HOST_SCHEMES:
        return bool(parts.hostname)
    return bool(parts.netloc or parts.path)
