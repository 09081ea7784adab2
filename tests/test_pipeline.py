"""End-to-end tests for the render pipeline, navigation and writer."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from mdxdoc.config import MdxDocConfig, OutputConfig, RenderConfig
from mdxdoc.document import BlockKind, RenderedDocument
from mdxdoc.loader import load_project
from mdxdoc.models import DeclarationKind
from mdxdoc.postproc.links import LinkInjector
from mdxdoc.postproc.repair import StructuralRepair
from mdxdoc.pipeline import RenderPipeline
from mdxdoc.writer import NAVIGATION_FILENAME, DocumentWriter

FIXTURE = Path(__file__).parent / "_fixtures" / "typedoc_project.json"


@pytest.fixture
def result():
    return RenderPipeline(RenderConfig()).run(load_project(FIXTURE))


def test_pages_follow_traversal_order(result) -> None:
    assert [page.location for page in result.pages] == [
        "enums/status",
        "classes/userclient",
        "interfaces/user",
        "type-aliases/userresult",
        "functions/fetchuser",
    ]
    assert result.overview.location == "index"


def test_links_are_injected_after_rendering(result) -> None:
    client = result.page_for("UserClient").to_text()

    assert "Client for the [User](/api/interfaces/user) endpoints." in client
    assert "The stored user. Returns Promise&lt;[User](/api/interfaces/user)&gt;." in client
    assert "const client = new UserClient('https://api');" in client
    assert "<Info>\n\nConnections are pooled.\n\n</Info>" in client


def test_function_page_uses_parameter_comments(result) -> None:
    page = result.page_for("fetchUser").to_text()

    assert 'description: "Fetches user data from the API."' in page
    assert '<ParamField path="userId" type="string" required>\nThe unique identifier for the user.\n</ParamField>' in page
    assert '<ParamField path="options" type="RequestOptions">' in page


def test_post_processing_is_idempotent(result) -> None:
    linker = LinkInjector()
    repair = StructuralRepair()
    for page in result.pages:
        again = repair.repair(linker.inject(page, result.references))
        assert again.blocks == page.blocks


def test_overview_groups_every_kind(result) -> None:
    text = result.overview.to_text()

    assert 'title: "demo-sdk"' in text
    assert 'description: "Example SDK for the demo service."' in text
    for group in ("Enumerations", "Classes", "Interfaces", "Type Aliases", "Functions"):
        assert f'<Accordion title="{group}">' in text
    assert "[View full documentation →](/api/classes/userclient)" in text


def test_navigation_manifest(result) -> None:
    assert result.navigation == {
        "name": "demo-sdk",
        "navigation": [
            {"group": "Overview", "pages": ["api/index"]},
            {"group": "Enumerations", "pages": ["api/enums/status"]},
            {"group": "Classes", "pages": ["api/classes/userclient"]},
            {"group": "Interfaces", "pages": ["api/interfaces/user"]},
            {"group": "Type Aliases", "pages": ["api/type-aliases/userresult"]},
            {"group": "Functions", "pages": ["api/functions/fetchuser"]},
        ],
    }


def test_worker_pool_matches_sequential_output(result) -> None:
    parallel = RenderPipeline(RenderConfig(workers=3)).run(load_project(FIXTURE))
    assert [page.to_text() for page in parallel.pages] == [page.to_text() for page in result.pages]
    assert parallel.overview.to_text() == result.overview.to_text()


def test_project_name_from_config(tmp_path: Path) -> None:
    config = MdxDocConfig(root=tmp_path, project_name="Demo SDK")
    result = RenderPipeline(config).run(load_project(FIXTURE))
    assert result.navigation["name"] == "Demo SDK"
    assert result.overview.frontmatter_value("title") == "Demo SDK"


def test_writer_mirrors_urls_on_disk(result, tmp_path: Path) -> None:
    written = DocumentWriter(OutputConfig()).write(result, tmp_path)

    assert (tmp_path / "api" / "classes" / "userclient.mdx").read_text(encoding="utf-8").startswith("---\n")
    assert (tmp_path / "api" / "index.mdx").exists()
    manifest = json.loads((tmp_path / NAVIGATION_FILENAME).read_text(encoding="utf-8"))
    assert manifest == result.navigation
    assert len(written) == 7


def test_writer_can_skip_navigation(result, tmp_path: Path) -> None:
    written = DocumentWriter(OutputConfig(extension=".md", navigation=False)).write(result, tmp_path)

    assert not (tmp_path / NAVIGATION_FILENAME).exists()
    assert (tmp_path / "api" / "enums" / "status.md").exists()
    assert len(written) == 6


def _assert_well_formed(text: str) -> None:
    open_tags = []
    for block in RenderedDocument.parse(text).blocks:
        if block.kind is BlockKind.HEADING:
            assert block.level <= 4, block.text
        elif block.kind is BlockKind.OPEN and not block.self_closing:
            open_tags.append(block.name)
        elif block.kind is BlockKind.CLOSE:
            assert open_tags and open_tags.pop() == block.name
    assert open_tags == []


def test_markup_inside_comments_is_repaired(graph) -> None:
    widget = graph.declaration(
        "Widget",
        DeclarationKind.CLASS,
        [graph.property("size", graph.intrinsic("number"), summary="Pixels.\n\n##### Units\n\n<Tip>")],
        remarks=["Intro\n\n##### Deep detail\n\n<Note>\n\nunclosed"],
    )
    rename = graph.function(
        "rename",
        [graph.param("name", graph.intrinsic("string"), summary="Does x.\n\n##### Extra")],
    )

    result = RenderPipeline(RenderConfig()).run(graph.project(widget, rename))
    widget_text = result.page_for("Widget").to_text()
    rename_text = result.page_for("rename").to_text()

    for page in result.pages:
        _assert_well_formed(page.to_text())
    _assert_well_formed(result.overview.to_text())
    assert "<Info>\n\nIntro\n\n**Deep detail**\n\nunclosed\n\n</Info>" in widget_text
    assert "<Note>" not in widget_text
    assert "<Tip>" not in widget_text
    assert "Pixels.\n\n**Units**" in widget_text
    assert '<ParamField path="name" type="string" required>\nDoes x.\n\n**Extra**\n</ParamField>' in rename_text
    assert "Extra." not in rename_text


class RecordingLinker(LinkInjector):
    def __init__(self) -> None:
        super().__init__()
        self.locations = []

    def inject(self, document, refs):
        self.locations.append(document.location)
        return super().inject(document, refs)


def test_overview_passes_through_the_linker() -> None:
    linker = RecordingLinker()
    result = RenderPipeline(RenderConfig(), linker=linker).run(load_project(FIXTURE))

    assert linker.locations[-1] == result.overview.location == "index"
    assert sorted(linker.locations[:-1]) == sorted(page.location for page in result.pages)
