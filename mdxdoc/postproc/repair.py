"""Structural repair of rendered documents."""

from __future__ import annotations

import re
from typing import List, Optional, Set

from ..config import MAX_HEADING_LEVEL
from ..document import FIELD_WRAPPERS, Block, BlockKind, RenderedDocument
from ..logging import get_logger

# Orphan closes of these tags are kept.
PRESERVED_ORPHAN_CLOSES = frozenset({"CodeGroup"})

_EXCESS_BLANKS = re.compile(r"\n(?:[ \t]*\n){4,}")


class StructuralRepair:
    """Balances container tags, demotes deep headings and drops empty wrappers."""

    def __init__(self, max_heading_level: int = MAX_HEADING_LEVEL) -> None:
        self.max_heading_level = max_heading_level
        self.logger = get_logger("postproc.repair")

    def repair(self, document: RenderedDocument) -> RenderedDocument:
        blocks = self.balance_tags(document.blocks)
        blocks = [self._flatten_heading(block) for block in blocks]
        blocks = self._clean(blocks)
        return document.with_blocks(blocks)

    def balance_tags(self, blocks: List[Block]) -> List[Block]:
        """Drop closes that match nothing and opens that never close."""
        stack: List[int] = []
        dropped: Set[int] = set()
        for index, block in enumerate(blocks):
            if block.kind is BlockKind.OPEN and not block.self_closing:
                stack.append(index)
            elif block.kind is BlockKind.CLOSE:
                match = self._find_open(blocks, stack, block.name)
                if match is None:
                    if block.name not in PRESERVED_ORPHAN_CLOSES:
                        self.logger.debug("Dropping unmatched </%s>", block.name)
                        dropped.add(index)
                    continue
                while len(stack) > match + 1:
                    discarded = stack.pop()
                    self.logger.debug("Dropping <%s> closed out of order", blocks[discarded].name)
                    dropped.add(discarded)
                stack.pop()
        for index in stack:
            self.logger.debug("Dropping unclosed <%s>", blocks[index].name)
            dropped.add(index)
        return [block for index, block in enumerate(blocks) if index not in dropped]

    @staticmethod
    def _find_open(blocks: List[Block], stack: List[int], name: str) -> Optional[int]:
        for position in range(len(stack) - 1, -1, -1):
            if blocks[stack[position]].name == name:
                return position
        return None

    def _flatten_heading(self, block: Block) -> Block:
        if block.kind is BlockKind.HEADING and block.level > self.max_heading_level:
            return Block.paragraph(f"**{block.text}**")
        return block

    def _clean(self, blocks: List[Block]) -> List[Block]:
        cleaned: List[Block] = []
        for block in blocks:
            if block.kind is BlockKind.TEXT:
                text = _EXCESS_BLANKS.sub("\n\n\n", block.text)
                text = "\n".join(line.rstrip() for line in text.split("\n")).strip("\n")
                if not text.strip():
                    continue
                if text != block.text:
                    block = Block.paragraph(text)
            if (
                block.kind is BlockKind.CLOSE
                and block.name in FIELD_WRAPPERS
                and cleaned
                and cleaned[-1].kind is BlockKind.OPEN
                and cleaned[-1].name == block.name
                and not cleaned[-1].self_closing
            ):
                cleaned.pop()
                continue
            cleaned.append(block)
        return cleaned


__all__ = ["PRESERVED_ORPHAN_CLOSES", "StructuralRepair"]
