"""FastAPI application entrypoint for blockdoc service mode."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Dict, List, Optional, Tuple, TypeVar

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ..analysis import block_kind_counts
from ..orchestrator import ExportOutcome, Orchestrator
from ..pipeline import EmptyInputError
from ..prompting.constants import DIAGRAM_TYPES, EXPORT_FORMATS

_T = TypeVar("_T")


class PathRequest(BaseModel):
    path: str


class GenerateResponse(BaseModel):
    block_count: int
    section_count: int
    kinds: Dict[str, int]
    sections: List[str]
    file_errors: Dict[str, str] = Field(default_factory=dict)


class ExportRequest(BaseModel):
    path: str
    formats: List[str] = Field(default_factory=list)
    diagrams: List[str] = Field(default_factory=list)


class ArtifactResult(BaseModel):
    format_id: str
    status: str
    filename: Optional[str] = None
    content: Optional[str] = None
    error: Optional[str] = None


class ExportResponse(BaseModel):
    succeeded: int
    failed: int
    results: List[ArtifactResult]


class AnalyzeResponse(BaseModel):
    summary: str
    architecture: str
    dependencies: List[str]
    recommendations: List[str]
    complexity: str
    token_usage: int
    estimated_processing_time: int
    file_types: List[Tuple[str, int]]
    file_tree: Dict[str, Any] = Field(default_factory=dict)


class FormatsResponse(BaseModel):
    formats: List[str]
    diagrams: List[str]


class HealthResponse(BaseModel):
    status: str


def _default_orchestrator() -> Orchestrator:
    return Orchestrator()


async def _run_blocking(func: Callable[[], _T]) -> _T:
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, func)


def create_app(
    orchestrator_factory: Callable[[], Orchestrator] = _default_orchestrator,
) -> FastAPI:
    """Create the FastAPI application exposing blockdoc operations."""

    app = FastAPI(title="blockdoc service", version="0.1.0")

    async def get_orchestrator() -> Orchestrator:
        return orchestrator_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.get("/formats", response_model=FormatsResponse)
    async def formats() -> FormatsResponse:
        return FormatsResponse(formats=list(EXPORT_FORMATS), diagrams=list(DIAGRAM_TYPES))

    @app.post("/generate", response_model=GenerateResponse)
    async def generate(
        payload: PathRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> GenerateResponse:
        result = await _run_blocking(lambda: orchestrator.run_generate(payload.path))
        return GenerateResponse(
            block_count=len(result.blocks),
            section_count=len(result.sections),
            kinds=block_kind_counts(result.blocks),
            sections=[section.title for section in result.sections],
            file_errors=result.file_errors,
        )

    @app.post("/export", response_model=ExportResponse)
    async def export(
        payload: ExportRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> ExportResponse:
        outcome: ExportOutcome = await _run_blocking(
            lambda: orchestrator.run_export(
                payload.path,
                payload.formats,
                payload.diagrams,
                write=False,
            )
        )
        results = [
            ArtifactResult(
                format_id=result.format_id,
                status="ok" if result.ok else "failed",
                filename=result.artifact.suggested_filename if result.artifact else None,
                content=result.artifact.content if result.artifact else None,
                error=result.error,
            )
            for result in outcome.report.results
        ]
        return ExportResponse(
            succeeded=len(outcome.report.succeeded),
            failed=len(outcome.report.failed),
            results=results,
        )

    @app.post("/analyze", response_model=AnalyzeResponse)
    async def analyze(
        payload: PathRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> AnalyzeResponse:
        analysis = await _run_blocking(lambda: orchestrator.run_analyze(payload.path))
        return AnalyzeResponse(**analysis.to_dict())

    @app.exception_handler(EmptyInputError)
    async def empty_input_handler(
        _: Any, exc: EmptyInputError
    ) -> JSONResponse:  # pragma: no cover - simple mapping
        return JSONResponse(status_code=409, content={"detail": str(exc)})

    @app.exception_handler(FileNotFoundError)
    async def file_not_found_handler(
        _: Any, exc: FileNotFoundError
    ) -> JSONResponse:  # pragma: no cover - simple mapping
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(ValueError)
    async def value_error_handler(
        _: Any, exc: ValueError
    ) -> JSONResponse:  # pragma: no cover - simple mapping
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(RuntimeError)
    async def runtime_error_handler(
        _: Any, exc: RuntimeError
    ) -> JSONResponse:  # pragma: no cover - simple mapping
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(
    host: str = "127.0.0.1", port: int = 8000
) -> None:  # pragma: no cover - integration path
    import uvicorn

    uvicorn.run(create_app(), host=host, port=port)
