"""Render pipeline: declaration graph in, repaired pages and overview out."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from .config import MdxDocConfig, RenderConfig
from .document import RenderedDocument
from .logging import get_logger
from .models import Declaration
from .navigation import NavigationBuilder
from .postproc.links import LinkInjector
from .postproc.overview import OverviewSummarizer
from .postproc.repair import StructuralRepair
from .references import ReferenceEntry, ReferenceMap, ReferenceResolver
from .rendering.components import MdxComponents
from .rendering.declarations import DeclarationRenderer

Stage = Callable[[RenderedDocument, ReferenceEntry, ReferenceMap], RenderedDocument]


@dataclass
class RenderResult:
    """Everything one run produces, in traversal order."""

    pages: List[RenderedDocument]
    overview: RenderedDocument
    references: ReferenceMap
    navigation: Dict[str, Any] = field(default_factory=dict)

    def page_for(self, name: str) -> Optional[RenderedDocument]:
        location = self.references.get(name)
        for page in self.pages:
            if page.location == location:
                return page
        return None


class RenderPipeline:
    """Runs the ordered page stages, then summarizes the results."""

    def __init__(
        self,
        config: MdxDocConfig | RenderConfig | None = None,
        *,
        resolver: ReferenceResolver | None = None,
        renderer: DeclarationRenderer | None = None,
        linker: LinkInjector | None = None,
        repair: StructuralRepair | None = None,
        summarizer: OverviewSummarizer | None = None,
        navigation: NavigationBuilder | None = None,
    ) -> None:
        if isinstance(config, MdxDocConfig):
            self.project_name: Optional[str] = config.project_name
            render_config = config.render
        else:
            self.project_name = None
            render_config = config or RenderConfig()
        self.config = render_config
        components = MdxComponents(render_config.templates_dir)
        self.resolver = resolver or ReferenceResolver(render_config)
        self.renderer = renderer or DeclarationRenderer(render_config, components)
        self.linker = linker or LinkInjector()
        self.repair = repair or StructuralRepair(render_config.max_heading_level)
        self.summarizer = summarizer or OverviewSummarizer(render_config, components)
        self.navigation = navigation or NavigationBuilder(render_config)
        self.logger = get_logger("pipeline")
        # Linking must see rendered text; repair must see linked text.
        self.stages: Tuple[Tuple[str, Stage], ...] = (
            ("render", self._render_stage),
            ("link", self._link_stage),
            ("repair", self._repair_stage),
        )

    def run(self, root: Declaration, *, project_name: Optional[str] = None) -> RenderResult:
        name = project_name or self.project_name or root.name or None
        self.logger.info("Rendering %s", name or "project")
        refs = self.resolver.build(root)

        if self.config.workers > 1 and len(refs.entries) > 1:
            with ThreadPoolExecutor(max_workers=self.config.workers) as executor:
                pages = list(executor.map(lambda entry: self.process(entry, refs), refs.entries))
        else:
            pages = [self.process(entry, refs) for entry in refs.entries]

        details = [(entry.declaration, page) for entry, page in zip(refs.entries, pages)]
        overview = self.summarizer.summarize(
            details,
            refs,
            project_name=name,
            description=root.summary or None,
        )
        overview = self.repair.repair(self.linker.inject(overview, refs))
        navigation = self.navigation.build(refs, name)
        self.logger.info("Rendered %d page(s) and the overview", len(pages))
        return RenderResult(pages=pages, overview=overview, references=refs, navigation=navigation)

    def process(self, entry: ReferenceEntry, refs: ReferenceMap) -> RenderedDocument:
        """Run every page stage for one declaration."""
        document = RenderedDocument(location=entry.location, title=entry.name)
        for stage_name, stage in self.stages:
            self.logger.debug("Stage %s: %s", stage_name, entry.location)
            document = stage(document, entry, refs)
        return document

    def _render_stage(self, document: RenderedDocument, entry: ReferenceEntry, refs: ReferenceMap) -> RenderedDocument:
        return self.renderer.render(entry.declaration, refs, location=entry.location)

    def _link_stage(self, document: RenderedDocument, entry: ReferenceEntry, refs: ReferenceMap) -> RenderedDocument:
        return self.linker.inject(document, refs)

    def _repair_stage(self, document: RenderedDocument, entry: ReferenceEntry, refs: ReferenceMap) -> RenderedDocument:
        return self.repair.repair(document)


__all__ = ["RenderPipeline", "RenderResult"]
