"""Tests for structural repair."""

from __future__ import annotations

from collections import Counter

from mdxdoc.document import Block, BlockKind, RenderedDocument
from mdxdoc.postproc.repair import StructuralRepair


def _repair(*blocks: Block) -> list[Block]:
    return StructuralRepair().repair(RenderedDocument(blocks=list(blocks))).blocks


def test_out_of_order_close_discards_inner_open() -> None:
    blocks = _repair(
        Block.open("Accordion", 'title="a"'),
        Block.open("Expandable", 'title="b"'),
        Block.paragraph("body"),
        Block.close("Accordion"),
    )
    assert [block.render() for block in blocks] == ['<Accordion title="a">', "body", "</Accordion>"]


def test_unmatched_close_is_dropped_except_code_group() -> None:
    blocks = _repair(Block.paragraph("text"), Block.close("Note"), Block.close("CodeGroup"))
    assert [block.render() for block in blocks] == ["text", "</CodeGroup>"]


def test_unclosed_open_is_dropped() -> None:
    blocks = _repair(Block.open("Info"), Block.paragraph("kept"))
    assert [block.render() for block in blocks] == ["kept"]


def test_deep_headings_become_bold_text() -> None:
    blocks = _repair(Block.heading(4, "Kept"), Block.heading(5, "Deep"), Block.heading(6, "Deeper"))
    assert blocks[0] == Block.heading(4, "Kept")
    assert blocks[1] == Block.paragraph("**Deep**")
    assert blocks[2] == Block.paragraph("**Deeper**")


def test_empty_field_wrappers_are_dropped() -> None:
    blocks = _repair(
        Block.open("Expandable", 'title="Parameters"'),
        Block.open("ParamField", 'path="id" type="string"'),
        Block.paragraph("  "),
        Block.close("ParamField"),
        Block.open("ResponseField", 'name="returns" type="string"'),
        Block.close("ResponseField"),
        Block.close("Expandable"),
    )
    assert [block.render() for block in blocks] == ['<Expandable title="Parameters">', "</Expandable>"]


def test_blank_runs_collapse_and_trailing_whitespace_is_stripped() -> None:
    blocks = _repair(Block.paragraph("first  \n\n\n\n\n\nsecond\t"))
    assert blocks[0].text == "first\n\n\nsecond"


def test_repair_is_idempotent_and_balanced() -> None:
    messy = RenderedDocument.parse(
        "## Title\n\n<Accordion title=\"x\">\n\n<Expandable title=\"y\">\n\n"
        "text\n\n</Accordion>\n\n</Note>\n\n##### Deep\n\n<Info>\n\ndangling\n"
    )
    repair = StructuralRepair()

    once = repair.repair(messy)
    twice = repair.repair(once)

    assert once.blocks == twice.blocks
    opens = Counter(block.name for block in once.blocks if block.kind is BlockKind.OPEN and not block.self_closing)
    closes = Counter(block.name for block in once.blocks if block.kind is BlockKind.CLOSE)
    assert opens == closes
    assert "**Deep**" in once.to_text()
