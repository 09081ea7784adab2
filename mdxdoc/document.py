"""Structured block model for rendered MDX documents."""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass, field, replace
from typing import Iterable, Iterator, List, Optional

FIELD_WRAPPERS: frozenset[str] = frozenset({"ParamField", "ResponseField"})

_HEADING_PATTERN = re.compile(r"^(#{1,6})\s+(.+?)\s*$")
_OPEN_TAG_PATTERN = re.compile(
    r"""^\s*<([A-Z]\w*)((?:\s(?:[^>"'/]|"[^"]*"|'[^']*'|/(?!\s*>))*)?)(/?)>\s*$"""
)
_CLOSE_TAG_PATTERN = re.compile(r"^\s*</([A-Z]\w*)>\s*$")


class BlockKind(enum.Enum):
    FRONTMATTER = "frontmatter"
    HEADING = "heading"
    TEXT = "text"
    CODE = "code"
    OPEN = "open"
    CLOSE = "close"


@dataclass(frozen=True)
class Block:
    """One structural unit of a document.

    ``text`` holds the literal MDX for frontmatter, text and code blocks, the
    heading title for headings, and the full tag line for container tags.
    """

    kind: BlockKind
    text: str = ""
    level: int = 0
    name: str = ""
    self_closing: bool = False

    @classmethod
    def heading(cls, level: int, text: str) -> "Block":
        return cls(BlockKind.HEADING, text=text.strip(), level=level)

    @classmethod
    def paragraph(cls, text: str) -> "Block":
        return cls(BlockKind.TEXT, text=text)

    @classmethod
    def code(cls, code: str, language: str = "") -> "Block":
        return cls(BlockKind.CODE, text=f"```{language}\n{code.rstrip()}\n```")

    @classmethod
    def open(cls, name: str, attributes: str = "", *, self_closing: bool = False) -> "Block":
        attrs = f" {attributes.strip()}" if attributes.strip() else ""
        tag = f"<{name}{attrs} />" if self_closing else f"<{name}{attrs}>"
        return cls(BlockKind.OPEN, text=tag, name=name, self_closing=self_closing)

    @classmethod
    def close(cls, name: str) -> "Block":
        return cls(BlockKind.CLOSE, text=f"</{name}>", name=name)

    @property
    def is_container(self) -> bool:
        return self.kind in (BlockKind.OPEN, BlockKind.CLOSE)

    def render(self) -> str:
        if self.kind is BlockKind.HEADING:
            return f"{'#' * self.level} {self.text}"
        return self.text


@dataclass
class RenderedDocument:
    """Ordered blocks for one output page, tagged with its location."""

    location: str = ""
    title: str = ""
    blocks: List[Block] = field(default_factory=list)

    def append(self, block: Block) -> "RenderedDocument":
        self.blocks.append(block)
        return self

    def extend(self, blocks: Iterable[Block]) -> "RenderedDocument":
        self.blocks.extend(blocks)
        return self

    def with_blocks(self, blocks: Iterable[Block]) -> "RenderedDocument":
        """Return a copy of this document holding ``blocks``."""
        return replace(self, blocks=list(blocks))

    def __iter__(self) -> Iterator[Block]:
        return iter(self.blocks)

    def __len__(self) -> int:
        return len(self.blocks)

    def headings(self, level: Optional[int] = None) -> List[Block]:
        return [
            block
            for block in self.blocks
            if block.kind is BlockKind.HEADING and (level is None or block.level == level)
        ]

    def frontmatter_value(self, key: str) -> Optional[str]:
        """Return a scalar from the frontmatter block, unescaping quotes."""
        for block in self.blocks:
            if block.kind is not BlockKind.FRONTMATTER:
                continue
            match = re.search(rf'^{re.escape(key)}:\s*"((?:[^"\\]|\\.)*)"\s*$', block.text, re.MULTILINE)
            if match:
                return match.group(1).replace('\\"', '"')
        return None

    def to_text(self) -> str:
        if not self.blocks:
            return ""
        parts: List[str] = [self.blocks[0].render()]
        for previous, current in zip(self.blocks, self.blocks[1:]):
            parts.append(_separator(previous, current))
            parts.append(current.render())
        return "".join(parts).rstrip() + "\n"

    @classmethod
    def parse(cls, text: str, *, location: str = "", title: str = "") -> "RenderedDocument":
        """Build a document from MDX text.

        Fenced code is tracked with an open/close toggle so tag-like or
        heading-like lines inside it stay literal.
        """
        lines = text.replace("\r\n", "\n").replace("\r", "\n").split("\n")
        blocks: List[Block] = []
        paragraph: List[str] = []
        index = 0

        def flush() -> None:
            if paragraph:
                blocks.append(Block.paragraph("\n".join(paragraph)))
                paragraph.clear()

        if lines and lines[0].strip() == "---":
            for end in range(1, len(lines)):
                if lines[end].strip() == "---":
                    blocks.append(Block(BlockKind.FRONTMATTER, text="\n".join(lines[: end + 1])))
                    index = end + 1
                    break

        while index < len(lines):
            line = lines[index]
            stripped = line.strip()
            if stripped.startswith("```"):
                flush()
                fence = [line.rstrip()]
                index += 1
                while index < len(lines):
                    fence.append(lines[index].rstrip())
                    if lines[index].strip().startswith("```"):
                        break
                    index += 1
                blocks.append(Block(BlockKind.CODE, text="\n".join(fence)))
                index += 1
                continue
            if not stripped:
                flush()
                index += 1
                continue
            heading = _HEADING_PATTERN.match(stripped)
            close_tag = _CLOSE_TAG_PATTERN.match(line)
            open_tag = _OPEN_TAG_PATTERN.match(line)
            if heading:
                flush()
                blocks.append(Block.heading(len(heading.group(1)), heading.group(2)))
            elif close_tag:
                flush()
                blocks.append(Block.close(close_tag.group(1)))
            elif open_tag:
                flush()
                blocks.append(
                    Block(
                        BlockKind.OPEN,
                        text=stripped,
                        name=open_tag.group(1),
                        self_closing=bool(open_tag.group(3)),
                    )
                )
            else:
                paragraph.append(line.rstrip())
            index += 1
        flush()
        return cls(location=location, title=title, blocks=blocks)


def _separator(previous: Block, current: Block) -> str:
    if previous.kind is BlockKind.OPEN and previous.name in FIELD_WRAPPERS and not previous.self_closing:
        return "\n"
    if current.kind is BlockKind.CLOSE and current.name in FIELD_WRAPPERS:
        return "\n"
    return "\n\n"


__all__ = ["Block", "BlockKind", "FIELD_WRAPPERS", "RenderedDocument"]
