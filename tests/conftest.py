from __future__ import annotations

import pytest

from mdxdoc.config import RenderConfig
from mdxdoc.references import ReferenceMap, ReferenceResolver
from tests._fixtures.graph_builder import GraphBuilder


@pytest.fixture
def graph() -> GraphBuilder:
    """Provide terse declaration-graph constructors."""
    return GraphBuilder()


@pytest.fixture
def resolve():
    """Resolve a root declaration into a ReferenceMap with default settings."""

    def _resolve(root) -> ReferenceMap:
        return ReferenceResolver(RenderConfig()).build(root)

    return _resolve
