"""Navigation manifest for the documentation site."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from .config import RenderConfig
from .models import DeclarationKind
from .references import ReferenceMap

DEFAULT_PROJECT_NAME = "API Reference"


class NavigationBuilder:
    """Builds the ``mint.json`` style manifest from the reference groups."""

    def __init__(self, config: RenderConfig | None = None) -> None:
        self.config = config or RenderConfig()

    def build(self, refs: ReferenceMap, project_name: Optional[str] = None) -> Dict[str, Any]:
        prefix = f"{refs.base_path}/" if refs.base_path else ""
        navigation: List[Dict[str, Any]] = [
            {"group": "Overview", "pages": [f"{prefix}{self.config.index_page}"]}
        ]
        for group, entries in refs.groups():
            pages = [f"{prefix}{entry.location}" for entry in entries if entry.kind is not DeclarationKind.MODULE]
            if pages:
                navigation.append({"group": group, "pages": list(dict.fromkeys(pages))})
        return {"name": project_name or DEFAULT_PROJECT_NAME, "navigation": navigation}


__all__ = ["NavigationBuilder"]
