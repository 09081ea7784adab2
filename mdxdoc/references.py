"""Name to output-location resolution for a declaration graph."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from .config import RenderConfig
from .logging import get_logger
from .models import PAGE_KINDS, Declaration, DeclarationKind

GROUP_ORDER: Tuple[Tuple[str, DeclarationKind], ...] = (
    ("Enumerations", DeclarationKind.ENUM),
    ("Classes", DeclarationKind.CLASS),
    ("Interfaces", DeclarationKind.INTERFACE),
    ("Type Aliases", DeclarationKind.TYPE_ALIAS),
    ("Functions", DeclarationKind.FUNCTION),
)


def slugify(text: str) -> str:
    """Lowercase ``text`` and collapse non-alphanumeric runs into single hyphens."""
    slug = re.sub(r"[^a-z0-9]+", "-", text.lower())
    return slug.strip("-")


@dataclass(frozen=True)
class ReferenceEntry:
    """One page-worthy declaration and where its page lives."""

    name: str
    kind: DeclarationKind
    location: str
    declaration: Declaration


class ReferenceMap(Mapping):
    """Read-only ``name -> location`` map plus the ordered entries it was built from."""

    def __init__(
        self,
        entries: Sequence[ReferenceEntry] = (),
        *,
        base_path: str = "api",
    ) -> None:
        locations: Dict[str, str] = {}
        for entry in entries:
            locations[entry.name] = entry.location
        self._locations = MappingProxyType(locations)
        self._entries: Tuple[ReferenceEntry, ...] = tuple(entries)
        self._base_path = base_path.strip("/")

    def __getitem__(self, name: str) -> str:
        return self._locations[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._locations)

    def __len__(self) -> int:
        return len(self._locations)

    def __repr__(self) -> str:
        return f"ReferenceMap({dict(self._locations)!r})"

    @property
    def base_path(self) -> str:
        return self._base_path

    @property
    def entries(self) -> Tuple[ReferenceEntry, ...]:
        return self._entries

    @property
    def declarations(self) -> List[Declaration]:
        return [entry.declaration for entry in self._entries]

    def href(self, name: str) -> Optional[str]:
        """Absolute site URL for ``name``, or None when it has no page."""
        location = self._locations.get(name)
        if location is None:
            return None
        return self.url_for(location)

    def url_for(self, location: str) -> str:
        prefix = f"/{self._base_path}/" if self._base_path else "/"
        return prefix + location.lstrip("/")

    def names_longest_first(self) -> List[str]:
        return sorted(self._locations, key=lambda name: (-len(name), name))

    def groups(self) -> List[Tuple[str, List[ReferenceEntry]]]:
        """Entries grouped for navigation: Enumerations, Classes, Interfaces, Type Aliases, Functions."""
        grouped: List[Tuple[str, List[ReferenceEntry]]] = []
        for title, kind in GROUP_ORDER:
            members = [entry for entry in self._entries if entry.kind is kind]
            if members:
                grouped.append((title, members))
        return grouped


class ReferenceResolver:
    """Builds a ReferenceMap with one pre-order traversal of the declaration tree."""

    def __init__(self, config: RenderConfig | None = None) -> None:
        self.config = config or RenderConfig()
        self.logger = get_logger("references")

    def build(self, root: Declaration) -> ReferenceMap:
        entries: List[ReferenceEntry] = []
        seen: Dict[str, ReferenceEntry] = {}
        for declaration in root.walk():
            if declaration.kind not in PAGE_KINDS:
                continue
            entry = ReferenceEntry(
                name=declaration.name,
                kind=declaration.kind,
                location=self.location_for(declaration),
                declaration=declaration,
            )
            previous = seen.get(entry.name)
            if previous is not None:
                # Last visited wins in the map; both pages are still rendered.
                self.logger.warning(
                    "Duplicate page name %s (%s at %s, %s at %s); links resolve to the latter",
                    entry.name,
                    previous.kind.value,
                    previous.location,
                    entry.kind.value,
                    entry.location,
                )
            seen[entry.name] = entry
            entries.append(entry)
        self.logger.debug("Resolved %d page locations", len(entries))
        return ReferenceMap(entries, base_path=self.config.base_path)

    def location_for(self, declaration: Declaration) -> str:
        folder = self.config.folder_for(declaration.kind)
        slug = slugify(declaration.name) or "index"
        return f"{folder}/{slug}" if folder else slug


__all__ = ["GROUP_ORDER", "ReferenceEntry", "ReferenceMap", "ReferenceResolver", "slugify"]
