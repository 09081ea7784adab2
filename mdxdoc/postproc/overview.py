"""Condensed index page built from the repaired detail pages."""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from ..config import RenderConfig
from ..document import Block, BlockKind, RenderedDocument
from ..logging import get_logger
from ..models import Declaration, DeclarationKind
from ..references import GROUP_ORDER, ReferenceMap
from ..rendering.components import MdxComponents

OVERVIEW_GROUPS: Tuple[Tuple[str, DeclarationKind], ...] = GROUP_ORDER + (("Modules", DeclarationKind.MODULE),)

# Lines starting with these never serve as an entry description.
SKIPPED_PREFIXES = ("`", ">", "<", "*", "|", "-")

DEFAULT_TITLE = "API Reference"


class OverviewSummarizer:
    """Reduces every detail page to a heading, one line and a link."""

    def __init__(
        self,
        config: RenderConfig | None = None,
        components: MdxComponents | None = None,
    ) -> None:
        self.config = config or RenderConfig()
        self.components = components or MdxComponents(self.config.templates_dir)
        self.logger = get_logger("postproc.overview")

    def summarize(
        self,
        details: Sequence[Tuple[Declaration, RenderedDocument]],
        refs: ReferenceMap,
        *,
        project_name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> RenderedDocument:
        title = project_name or DEFAULT_TITLE
        overview = RenderedDocument(location=self.config.index_page, title=title)
        overview.append(
            self.components.frontmatter(title, description or f"Complete API reference for {title}.")
        )

        sections: List[Tuple[str, List[Block]]] = []
        for group, kind in OVERVIEW_GROUPS:
            blocks: List[Block] = []
            for declaration, document in details:
                if declaration.kind is kind:
                    blocks.extend(self.summarize_entry(declaration, document, refs))
            if blocks:
                sections.append((group, blocks))

        if len(sections) > 1:
            overview.extend(self.components.accordion_group(sections))
        elif sections:
            group, blocks = sections[0]
            overview.append(Block.heading(2, group))
            overview.extend(blocks)
        self.logger.debug("Summarized %d group(s) into %s", len(sections), overview.location)
        return overview

    def summarize_entry(
        self,
        declaration: Declaration,
        document: RenderedDocument,
        refs: ReferenceMap,
    ) -> List[Block]:
        heading_index = _top_heading_index(document)
        name = document.blocks[heading_index].text if heading_index is not None else declaration.name
        section = document.blocks[heading_index + 1 :] if heading_index is not None else document.blocks
        section = _until_next_heading(section)

        blocks = [Block.heading(3, name)]
        description = _first_description_line(section) or document.frontmatter_value("description") or ""
        if description:
            blocks.append(Block.paragraph(description))
        if declaration.kind is DeclarationKind.ENUM:
            table = _first_table(document.blocks[heading_index + 1 :] if heading_index is not None else document.blocks)
            if table is not None:
                blocks.append(table)
            return blocks
        blocks.append(Block.paragraph(f"[View full documentation →]({refs.url_for(document.location)})"))
        return blocks


def _top_heading_index(document: RenderedDocument) -> Optional[int]:
    headings = [(index, block) for index, block in enumerate(document.blocks) if block.kind is BlockKind.HEADING]
    if not headings:
        return None
    top_level = min(block.level for _, block in headings)
    return next(index for index, block in headings if block.level == top_level)


def _until_next_heading(blocks: Sequence[Block]) -> List[Block]:
    section: List[Block] = []
    for block in blocks:
        if block.kind is BlockKind.HEADING:
            break
        section.append(block)
    return section


def _first_description_line(blocks: Sequence[Block]) -> str:
    depth = 0
    for block in blocks:
        if block.kind is BlockKind.OPEN and not block.self_closing:
            depth += 1
        elif block.kind is BlockKind.CLOSE:
            depth = max(depth - 1, 0)
        elif block.kind is BlockKind.TEXT and depth == 0:
            for line in block.text.split("\n"):
                stripped = line.strip()
                if stripped and not stripped.startswith(SKIPPED_PREFIXES):
                    return stripped
    return ""


def _first_table(blocks: Sequence[Block]) -> Optional[Block]:
    for block in blocks:
        if block.kind is BlockKind.TEXT and block.text.lstrip().startswith("|"):
            return block
    return None


__all__ = ["DEFAULT_TITLE", "OVERVIEW_GROUPS", "OverviewSummarizer"]
