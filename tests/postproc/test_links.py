"""Tests for cross-reference link injection."""

from __future__ import annotations

import pytest

from mdxdoc.document import Block, RenderedDocument
from mdxdoc.postproc.links import LinkInjector


@pytest.fixture
def refs(graph, resolve):
    return resolve(
        graph.project(
            graph.interface("User"),
            graph.interface("UserRole"),
            graph.function("load"),
        )
    )


def _inject(refs, *blocks: Block) -> RenderedDocument:
    return LinkInjector().inject(RenderedDocument(location="x", blocks=list(blocks)), refs)


def test_standalone_literal_becomes_link(refs) -> None:
    document = _inject(refs, Block.paragraph("Returns a `User` object."))
    assert document.blocks[0].text == "Returns a [User](/api/interfaces/user) object."


def test_parameter_prefixed_literal_keeps_code_style(refs) -> None:
    document = _inject(refs, Block.paragraph("**owner**: `User`\nrole?: `UserRole`"))
    assert document.blocks[0].text == (
        "**owner**: [`User`](/api/interfaces/user)\nrole?: [`UserRole`](/api/interfaces/userrole)"
    )


def test_generic_argument_is_unwrapped_and_escaped(refs) -> None:
    document = _inject(refs, Block.paragraph("Resolves to `Promise<User>`."))
    assert document.blocks[0].text == "Resolves to Promise&lt;[User](/api/interfaces/user)&gt;."


def test_longest_name_wins(refs) -> None:
    document = _inject(refs, Block.paragraph("See `UserRole` and `User`."))
    assert document.blocks[0].text == (
        "See [UserRole](/api/interfaces/userrole) and [User](/api/interfaces/user)."
    )


def test_literal_inside_words_is_left_alone(refs) -> None:
    document = _inject(refs, Block.paragraph("a`User`b and `User()`"))
    assert document.blocks[0].text == "a`User`b and `User()`"


def test_code_headings_and_tags_are_never_touched(refs) -> None:
    blocks = [
        Block.code("const u: `User` = load();", "ts"),
        Block.heading(3, "`User`"),
        Block.open("Accordion", 'title="`User`"'),
        Block.paragraph("```ts\nlet x = `User`;\n```"),
        Block.close("Accordion"),
    ]
    document = _inject(refs, *blocks)
    assert document.blocks == blocks


def test_existing_links_do_not_block_later_spans(refs) -> None:
    line = "[load](/api/functions/load) `(id: string)` returns `User`"
    document = _inject(refs, Block.paragraph(line))
    assert document.blocks[0].text == (
        "[load](/api/functions/load) `(id: string)` returns [User](/api/interfaces/user)"
    )


def test_injection_is_idempotent(refs) -> None:
    source = "**owner**: `User`\nUses `Promise<UserRole>` and `User`, plus `load`."
    once = _inject(refs, Block.paragraph(source))
    twice = LinkInjector().inject(once, refs)
    assert once.blocks == twice.blocks
    assert "`User`" not in twice.blocks[0].text.replace("[`User`]", "")
