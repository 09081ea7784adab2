"""Cross-reference link injection for rendered documents."""

from __future__ import annotations

import re
from typing import List, Optional, Tuple

from ..document import Block, BlockKind, RenderedDocument
from ..logging import get_logger
from ..references import ReferenceMap
from ..rendering.declarations import escape_inline

_SPAN_PATTERN = re.compile(r"(`[^`\n]*`)")
_PARAM_PREFIX_PATTERN = re.compile(r"(\*\*\w+\*\*|\w+\??): $")
_LEADING_BOUNDARY = re.compile(r"(^|\s)$")
_TRAILING_BOUNDARY = re.compile(r"^($|\s|[.,;:)>])")


class LinkInjector:
    """Turns literal-span mentions of known names into links.

    Only TEXT blocks are rewritten; code, frontmatter, headings and container
    tags pass through untouched. A second pass finds nothing left to link.
    """

    def __init__(self) -> None:
        self.logger = get_logger("postproc.links")

    def inject(self, document: RenderedDocument, refs: ReferenceMap) -> RenderedDocument:
        names = [(name, refs.href(name)) for name in refs.names_longest_first()]
        if not names:
            return document
        blocks: List[Block] = []
        changed = 0
        for block in document.blocks:
            if block.kind is not BlockKind.TEXT:
                blocks.append(block)
                continue
            text = self.inject_text(block.text, names)
            if text != block.text:
                changed += 1
                block = Block.paragraph(text)
            blocks.append(block)
        if changed:
            self.logger.debug("Linked references in %d block(s) of %s", changed, document.location or document.title)
        return document.with_blocks(blocks)

    def inject_text(self, text: str, names: List[Tuple[str, Optional[str]]]) -> str:
        lines = text.split("\n")
        in_code = False
        for index, line in enumerate(lines):
            if line.strip().startswith("```"):
                in_code = not in_code
                continue
            if in_code or "`" not in line:
                continue
            lines[index] = self._inject_line(line, names)
        return "\n".join(lines)

    def _inject_line(self, line: str, names: List[Tuple[str, Optional[str]]]) -> str:
        # Odd indexes are literal spans; even indexes are the text between them.
        parts = _SPAN_PATTERN.split(line)
        for index in range(1, len(parts), 2):
            before = parts[index - 1]
            after = parts[index + 1] if index + 1 < len(parts) else ""
            inner = parts[index][1:-1]
            for name, href in names:
                if not href:
                    continue
                replacement = self._link_span(inner, name, href, before, after)
                if replacement is not None:
                    parts[index] = replacement
                    break
        return "".join(parts)

    @staticmethod
    def _link_span(inner: str, name: str, href: str, before: str, after: str) -> Optional[str]:
        if inner == name:
            if _PARAM_PREFIX_PATTERN.search(before):
                return f"[`{name}`]({href})"
        else:
            match = re.fullmatch(rf"(.*?<)({re.escape(name)})(>.*)", inner, re.DOTALL)
            if match:
                return f"{escape_inline(match.group(1))}[{name}]({href}){escape_inline(match.group(3))}"
            return None
        if _LEADING_BOUNDARY.search(before) and _TRAILING_BOUNDARY.search(after):
            return f"[{name}]({href})"
        return None


__all__ = ["LinkInjector"]
