"""FastAPI application entrypoint for depinfer service mode."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, List, Optional

from fastapi import Depends, FastAPI, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from ..config import ConfigError
from ..engine import DependencyEngine
from ..errors import DepInferError, InvalidRootError, NoCodeFilesFoundError
from ..formatter import format_context
from ..logging import get_logger
from ..models import AnalysisOutcome

_logger = get_logger("service")


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class AnalyzePathRequest(_CamelModel):
    path: str
    service_name: Optional[str] = Field(default=None, alias="serviceName")


class UploadedFile(BaseModel):
    path: str
    content: str


class AnalyzeFilesRequest(_CamelModel):
    files: List[UploadedFile]
    service_name: Optional[str] = Field(default=None, alias="serviceName")


class DependencyModel(_CamelModel):
    service_name: str = Field(alias="serviceName")
    source: str
    confidence: str
    evidence: str


class AnalyzeResponse(_CamelModel):
    success: bool = True
    service_name: str = Field(alias="serviceName")
    dependencies: List[DependencyModel]
    context: str
    file_count: int = Field(alias="fileCount")


class HealthResponse(BaseModel):
    status: str


def _default_engine() -> DependencyEngine:
    return DependencyEngine()


def _to_response(outcome: AnalysisOutcome) -> AnalyzeResponse:
    analysis = outcome.analysis
    return AnalyzeResponse(
        service_name=analysis.service_name,
        dependencies=[
            DependencyModel(**dependency.to_dict()) for dependency in analysis.dependencies
        ],
        context=format_context(analysis),
        file_count=outcome.files_scanned,
    )


def create_app(
    engine_factory: Callable[[], DependencyEngine] = _default_engine,
) -> FastAPI:
    """Create the FastAPI application exposing dependency analysis."""

    app = FastAPI(title="depinfer", version="0.1.0")

    async def get_engine() -> DependencyEngine:
        # one engine per request keeps runs independent
        return engine_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/analyze", response_model=AnalyzeResponse, response_model_by_alias=True)
    async def analyze_path(
        payload: AnalyzePathRequest,
        engine: DependencyEngine = Depends(get_engine),
    ) -> AnalyzeResponse:
        if not payload.path.strip():
            raise HTTPException(status_code=400, detail="Please provide a valid directory path")
        _logger.info("Analyzing directory %s", payload.path)

        def _run() -> AnalysisOutcome:
            return engine.analyze_path(payload.path, service_name=payload.service_name)

        outcome = await asyncio.get_running_loop().run_in_executor(None, _run)
        return _to_response(outcome)

    @app.post("/analyze/files", response_model=AnalyzeResponse, response_model_by_alias=True)
    async def analyze_files(
        payload: AnalyzeFilesRequest,
        engine: DependencyEngine = Depends(get_engine),
    ) -> AnalyzeResponse:
        records = [(item.path, item.content) for item in payload.files]

        def _run() -> AnalysisOutcome:
            return engine.analyze_files(records, service_name=payload.service_name)

        outcome = await asyncio.get_running_loop().run_in_executor(None, _run)
        return _to_response(outcome)

    @app.exception_handler(InvalidRootError)
    async def invalid_root_handler(_: Any, exc: InvalidRootError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(ConfigError)
    async def config_error_handler(_: Any, exc: ConfigError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(ValueError)
    async def value_error_handler(_: Any, exc: ValueError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(NoCodeFilesFoundError)
    async def no_code_files_handler(_: Any, exc: NoCodeFilesFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(DepInferError)
    async def analysis_error_handler(_: Any, exc: DepInferError) -> JSONResponse:
        _logger.error("Analysis failed: %s", exc)
        return JSONResponse(status_code=500, content={"detail": f"Analysis failed: {exc}"})

    return app


def run_service(host: str = "127.0.0.1", port: int = 8000) -> None:  # pragma: no cover - integration path
    import uvicorn

    uvicorn.run(create_app(), host=host, port=port)
