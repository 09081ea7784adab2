"""mdxdoc: render declaration graphs into MDX reference documentation."""

from .document import Block, BlockKind, RenderedDocument
from .models import Declaration, DeclarationKind
from .pipeline import RenderPipeline, RenderResult
from .references import ReferenceMap, ReferenceResolver

__all__ = [
    "Block",
    "BlockKind",
    "Declaration",
    "DeclarationKind",
    "ReferenceMap",
    "ReferenceResolver",
    "RenderPipeline",
    "RenderResult",
    "RenderedDocument",
]

__version__ = "0.1.0"
