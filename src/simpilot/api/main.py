"""
FastAPI application exposing the instruction pipeline over HTTP.

One orchestrator serves the whole process; instructions are processed one at
a time behind an asyncio.Lock.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Any

import structlog
from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from simpilot import __version__
from simpilot.backend.idb import IdbBackend
from simpilot.backend.interface import SimulatorBackend
from simpilot.config import SimpilotSettings, load_settings
from simpilot.orchestrator.executor import Orchestrator
from simpilot.parser.models import CommandInfo
from simpilot.parser.parser import InstructionParser

logger = structlog.get_logger(__name__)


class InstructionRequest(BaseModel):
    """Request carrying one natural-language instruction."""

    instruction: str = Field(..., min_length=1, description="Free-text instruction")


class SuggestionsResponse(BaseModel):
    """Completion suggestions for partial text."""

    query: str
    suggestions: list[str]


class SessionResponse(BaseModel):
    """Active session of the server orchestrator."""

    session_id: str | None = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    timestamp: datetime
    version: str


class AppState:
    """Per-application state, stored on ``app.state.simpilot``."""

    def __init__(self) -> None:
        self.orchestrator: Orchestrator | None = None
        self.lock: asyncio.Lock | None = None

    def require_orchestrator(self) -> Orchestrator:
        if self.orchestrator is None:
            raise HTTPException(status_code=503, detail="Orchestrator not available")
        return self.orchestrator


def create_app(
    settings: SimpilotSettings | None = None,
    backend: SimulatorBackend | None = None,
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        settings: Settings to use; loaded from environment/YAML when omitted
        backend: Simulator backend; an IdbBackend when omitted
    """
    settings = settings or load_settings()
    state = AppState()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        log = logger.bind(component="api")
        log.info("Starting simpilot API server")

        state.orchestrator = Orchestrator(
            InstructionParser(),
            backend or IdbBackend(settings),
            settings=settings,
        )
        state.lock = asyncio.Lock()

        yield

        log.info("Shutting down simpilot API server")
        if state.orchestrator:
            state.orchestrator.close()
        state.orchestrator = None
        state.lock = None

    app = FastAPI(
        title="simpilot API",
        description="Natural-language control of iOS simulators",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.simpilot = state

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def invalid_parameters(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={
                "success": False,
                "error": "Invalid parameters",
                "detail": _validation_errors(exc),
            },
        )

    @app.get("/health", response_model=HealthResponse)
    async def health_check() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(
            status="healthy",
            timestamp=datetime.now(UTC),
            version=__version__,
        )

    @app.post("/api/v1/instructions")
    async def process_instruction(request: InstructionRequest) -> JSONResponse:
        """Execute one instruction and return its result envelope."""
        orchestrator = state.require_orchestrator()
        lock = state.lock or asyncio.Lock()
        try:
            async with lock:
                result = await orchestrator.process_instruction(request.instruction)
        except Exception as e:
            logger.error("Instruction failed", instruction=request.instruction, error=str(e))
            return JSONResponse(status_code=500, content={"success": False, "error": str(e)})
        return JSONResponse(content=result.to_dict())

    @app.get("/api/v1/commands", response_model=list[CommandInfo])
    async def list_commands() -> list[CommandInfo]:
        """List every supported command."""
        return state.require_orchestrator().get_supported_commands()

    @app.get("/api/v1/suggestions", response_model=SuggestionsResponse)
    async def suggestions(q: str = Query(default="")) -> SuggestionsResponse:
        orchestrator = state.require_orchestrator()
        return SuggestionsResponse(query=q, suggestions=orchestrator.suggest_completions(q))

    @app.get("/api/v1/history")
    async def history(limit: int | None = Query(default=None, ge=1)) -> list[dict[str, Any]]:
        orchestrator = state.require_orchestrator()
        return [entry.to_dict() for entry in orchestrator.get_command_history(limit)]

    @app.get("/api/v1/session", response_model=SessionResponse)
    async def session() -> SessionResponse:
        return SessionResponse(session_id=state.require_orchestrator().get_active_session_id())

    return app


def _validation_errors(exc: RequestValidationError) -> list[dict[str, Any]]:
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg", ""), "type": error.get("type", "")}
        for error in exc.errors()
    ]


def run_server(
    host: str | None = None,
    port: int | None = None,
    settings: SimpilotSettings | None = None,
) -> None:
    """Run the API server."""
    import uvicorn

    settings = settings or load_settings()
    uvicorn.run(
        create_app(settings),
        host=host or settings.api_host,
        port=port or settings.api_port,
    )


if __name__ == "__main__":
    run_server()
