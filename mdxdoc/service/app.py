"""FastAPI application entrypoint for mdxdoc service mode."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..config import load_config
from ..loader import project_from_dict
from ..pipeline import RenderPipeline, RenderResult


class RenderRequest(BaseModel):
    project: Dict[str, Any]
    project_name: Optional[str] = None


class PageModel(BaseModel):
    location: str
    title: str
    content: str


class RenderResponse(BaseModel):
    pages: List[PageModel]
    overview: str
    navigation: Dict[str, Any]


class HealthResponse(BaseModel):
    status: str


def _default_pipeline() -> RenderPipeline:
    return RenderPipeline(load_config(Path.cwd()))


def create_app(
    pipeline_factory: Callable[[], RenderPipeline] = _default_pipeline,
) -> FastAPI:
    """Create the FastAPI application exposing mdxdoc rendering."""

    app = FastAPI(title="mdxdoc Service", version="1.0.0")

    async def get_pipeline() -> RenderPipeline:
        # Built per request so config edits apply without a restart.
        return pipeline_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/render", response_model=RenderResponse)
    async def render(
        payload: RenderRequest,
        pipeline: RenderPipeline = Depends(get_pipeline),
    ) -> RenderResponse:
        def _run_render() -> RenderResult:
            root = project_from_dict(payload.project)
            return pipeline.run(root, project_name=payload.project_name)

        loop = asyncio.get_running_loop()
        result = await loop.run_in_executor(None, _run_render)
        return RenderResponse(
            pages=[
                PageModel(location=page.location, title=page.title, content=page.to_text())
                for page in result.pages
            ],
            overview=result.overview.to_text(),
            navigation=result.navigation,
        )

    @app.exception_handler(FileNotFoundError)
    async def file_not_found_handler(_: Any, exc: FileNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(RuntimeError)
    async def runtime_error_handler(_: Any, exc: RuntimeError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(host: str = "127.0.0.1", port: int = 8000) -> None:  # pragma: no cover - integration path
    import uvicorn

    uvicorn.run(create_app(), host=host, port=port)
