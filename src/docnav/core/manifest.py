"""Site manifest export.

The manifest is the read-only handoff to the renderer: site metadata,
theme options, navigation and every content unit with its sidebar.

Manifest structure:
    {
      "site": {"title": ..., "description": ..., "lang": ..., "head": [...]},
      "theme": {...},
      "navigation": {"nav": [...], "sidebars": [...]},
      "pages": [{"path": ..., "title": ..., "section_id": ..., ...}]
    }
"""

import json
from dataclasses import asdict
from pathlib import Path
from typing import Any

from docnav.core.site import SiteModel


def build_manifest(model: SiteModel) -> dict[str, Any]:
    """Build JSON-serializable manifest from a validated site model."""
    config = model.config
    edit_link = config.theme.edit_link

    pages: list[dict[str, Any]] = []
    for unit in model.registry:
        page: dict[str, Any] = dict(unit.to_dict())
        sidebar = model.tree.resolve_active_section(unit.path)
        page["sidebar"] = sidebar.prefix if sidebar is not None else None
        if edit_link is not None and unit.source_path is not None:
            page["edit_url"] = edit_link.url_for(unit.source_path)
        pages.append(page)

    return {
        "site": {
            "title": config.site.title,
            "description": config.site.description,
            "lang": config.site.lang,
            "head": [tag.to_list() for tag in config.site.head],
        },
        "theme": asdict(config.theme),
        "navigation": model.tree.to_dict(),
        "pages": pages,
    }


def write_manifest(path: Path, manifest: dict[str, Any]) -> None:
    """Write manifest as JSON, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(manifest, indent=2, ensure_ascii=False) + "\n",
        encoding="utf-8",
    )
