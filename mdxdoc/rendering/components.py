"""Mintlify component builders producing document blocks."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from jinja2 import Environment, FileSystemLoader

from ..document import Block, BlockKind

# Plain text becomes one paragraph; parsed blocks are wrapped as given.
Content = Union[str, Sequence[Block]]

CALLOUT_TAGS = {"info": "Info", "warning": "Warning", "note": "Note", "tip": "Tip", "check": "Check"}

DEFAULT_TEMPLATES_DIR = Path(__file__).with_name("templates")


def sanitize_attribute(text: str) -> str:
    """Escape a value for use inside a double-quoted MDX attribute."""
    if not text:
        return ""
    return text.replace('"', '\\"').replace("\n", " ").replace("\r", "")


def anchor_for(text: str) -> str:
    return "-".join(text.lower().split())


class MdxComponents:
    """Builds container blocks and template-driven fragments for MDX pages."""

    def __init__(self, templates_dir: Path | None = None) -> None:
        self._env = self._create_env(templates_dir)

    def render_template(self, name: str, **context: object) -> str:
        return self._env.get_template(name).render(**context).strip()

    def frontmatter(self, title: str, description: str) -> Block:
        text = self.render_template(
            "frontmatter.j2",
            title=sanitize_attribute(title),
            description=sanitize_attribute(description).strip(),
        )
        return Block(BlockKind.FRONTMATTER, text=text)

    def table(self, headers: Sequence[str], rows: Iterable[Sequence[str]]) -> Block:
        cleaned = [[_table_cell(cell) for cell in row] for row in rows]
        return Block.paragraph(self.render_template("table.j2", headers=list(headers), rows=cleaned))

    def toc(self, items: Sequence[str]) -> List[Block]:
        if not items:
            return []
        links = self.render_template("toc.j2", items=[(item, anchor_for(item)) for item in items])
        return [Block.open("Toc"), Block.paragraph(links), Block.close("Toc")]

    def wrap(self, name: str, content: Sequence[Block], attributes: str = "") -> List[Block]:
        return [Block.open(name, attributes), *content, Block.close(name)]

    def accordion(self, title: str, content: Sequence[Block]) -> List[Block]:
        return self.wrap("Accordion", content, f'title="{sanitize_attribute(title)}"')

    def accordion_group(self, items: Sequence[Tuple[str, Sequence[Block]]]) -> List[Block]:
        blocks: List[Block] = []
        for title, content in items:
            blocks.extend(self.accordion(title, content))
        return self.wrap("AccordionGroup", blocks)

    def expandable(self, title: str, content: Sequence[Block], *, default_open: bool = False) -> List[Block]:
        attributes = f'title="{sanitize_attribute(title)}"' + (" defaultOpen" if default_open else "")
        return self.wrap("Expandable", content, attributes)

    def param_field(
        self,
        location: str,
        name: str,
        type_text: str,
        description: Content,
        *,
        required: bool = False,
    ) -> List[Block]:
        attributes = f'{location}="{sanitize_attribute(name)}" type="{sanitize_attribute(type_text)}"'
        if required:
            attributes += " required"
        return self.wrap("ParamField", _content_blocks(description), attributes)

    def response_field(
        self,
        name: str,
        type_text: str,
        description: Content,
        *,
        required: bool = False,
    ) -> List[Block]:
        attributes = f'name="{sanitize_attribute(name)}" type="{sanitize_attribute(type_text)}"'
        if required:
            attributes += " required"
        return self.wrap("ResponseField", _content_blocks(description), attributes)

    def callout(self, kind: str, text: Content, title: str = "") -> List[Block]:
        tag = CALLOUT_TAGS.get(kind, "Note")
        attributes = f'title="{sanitize_attribute(title)}"' if title else ""
        return self.wrap(tag, _content_blocks(text), attributes)

    def code_group(self, examples: Sequence[Mapping[str, str]]) -> List[Block]:
        blocks = [
            Block.code(example["code"], f"{example['language']} {example['title']}")
            for example in examples
        ]
        return self.wrap("CodeGroup", blocks)

    @staticmethod
    def _create_env(templates_dir: Optional[Path]) -> Environment:
        directories = []
        if templates_dir:
            directories.append(str(templates_dir))
        directories.append(str(DEFAULT_TEMPLATES_DIR))
        loader = FileSystemLoader(list(dict.fromkeys(directories)))
        return Environment(loader=loader, autoescape=False, trim_blocks=True, lstrip_blocks=True)


def _content_blocks(content: Content) -> List[Block]:
    if isinstance(content, str):
        return [Block.paragraph(content)] if content else []
    return list(content)


def _table_cell(value: str) -> str:
    return value.replace("|", "\\|").replace("\n", " ").strip()


__all__ = ["CALLOUT_TAGS", "MdxComponents", "anchor_for", "sanitize_attribute"]
