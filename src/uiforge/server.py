"""
ui-forge HTTP server.
Thin FastAPI transport over the AgentHandler pipeline.
"""

import time
from contextlib import asynccontextmanager
from typing import Any

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from injector import Injector
from prometheus_client import CONTENT_TYPE_LATEST
from pydantic import BaseModel

from uiforge import __version__
from uiforge.core import (
    configure_logging,
    create_container,
    get_logger,
    get_settings,
    init_tracer,
    PipelineError,
    PromptRequest,
    RollbackRequest,
    SessionRequest,
    Settings,
)
from uiforge.core.id import new_session_id
from uiforge.handlers import AgentHandler
from uiforge.models import CompletionProvider
from uiforge.monitoring import metrics_collector
from uiforge.storage import VersionStore


logger = get_logger(__name__)


def _dump(model: BaseModel) -> dict[str, Any]:
    return model.model_dump(mode="json", by_alias=True)


def create_app(container: Injector | None = None) -> FastAPI:
    """
    Build the application.

    Args:
        container: Pre-built injector. When omitted, one is created from
            settings during startup.
    """
    settings = container.get(Settings) if container is not None else get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if container is None:
            configure_logging(settings.log_level, settings.json_logs)
            app.state.container = create_container(settings)
        else:
            app.state.container = container
        # Resolve the pipeline now so provider misconfiguration fails startup.
        app.state.container.get(AgentHandler)
        init_tracer("ui-forge")
        app.state.started_at = time.time()
        logger.info("startup", version=__version__)

        yield

        provider = app.state.container.get(CompletionProvider)
        provider.close()
        logger.info("shutdown")

    app = FastAPI(
        title="ui-forge",
        description="Prompt-to-UI generation over a whitelisted component library",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    def handler() -> AgentHandler:
        return app.state.container.get(AgentHandler)

    # ------------------------------------------------------------------
    # Error mapping
    # ------------------------------------------------------------------

    @app.exception_handler(PipelineError)
    async def pipeline_error(request: Request, exc: PipelineError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code, content={"success": False, "error": str(exc)}
        )

    @app.exception_handler(RequestValidationError)
    async def invalid_request(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = exc.errors()
        if errors:
            field = ".".join(str(part) for part in errors[0].get("loc", ())[1:])
            message = f"{field}: {errors[0].get('msg', 'invalid')}" if field else errors[0].get("msg")
        else:
            message = "Invalid request"
        return JSONResponse(status_code=400, content={"success": False, "error": message})

    @app.exception_handler(Exception)
    async def unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.error("unhandled_error", path=request.url.path, error=str(exc), exc_info=exc)
        return JSONResponse(status_code=500, content={"success": False, "error": str(exc)})

    # ------------------------------------------------------------------
    # Routes
    # ------------------------------------------------------------------

    @app.get("/api/health")
    def health() -> dict[str, Any]:
        settings = app.state.container.get(Settings)
        store = app.state.container.get(VersionStore)
        return {
            "status": "ok",
            "service": "ui-forge",
            "version": __version__,
            "provider": settings.provider,
            "sessions": store.session_count(),
            "uptime_seconds": round(time.time() - app.state.started_at, 2),
        }

    @app.post("/api/sessions")
    def open_session() -> dict[str, Any]:
        """Issue a fresh session key. Clients may also bring their own."""
        return {"success": True, "sessionId": new_session_id()}

    @app.post("/api/generate")
    def generate(body: PromptRequest) -> dict[str, Any]:
        result = handler().generate(body.prompt, body.session_id)
        return {"success": True, **_dump(result)}

    @app.post("/api/modify")
    def modify(body: PromptRequest) -> dict[str, Any]:
        result = handler().modify(body.prompt, body.session_id)
        return {"success": True, **_dump(result)}

    @app.post("/api/regenerate")
    def regenerate(body: SessionRequest) -> dict[str, Any]:
        result = handler().regenerate(body.session_id)
        return {"success": True, **_dump(result)}

    @app.get("/api/versions/{session_id}")
    def versions(session_id: str) -> dict[str, Any]:
        summaries = handler().get_versions(session_id)
        return {"success": True, "versions": [_dump(s) for s in summaries]}

    @app.post("/api/rollback")
    def rollback(body: RollbackRequest) -> dict[str, Any]:
        version = handler().rollback(body.session_id, body.version_id)
        return {"success": True, "version": _dump(version)}

    @app.delete("/api/sessions/{session_id}")
    def clear_session(session_id: str) -> dict[str, Any]:
        handler().clear_session(session_id)
        return {"success": True}

    @app.get("/metrics")
    def metrics() -> Response:
        metrics_collector.update_uptime()
        return Response(content=metrics_collector.get_metrics(), media_type=CONTENT_TYPE_LATEST)

    return app


def serve() -> None:
    """Console entry point."""
    settings = get_settings()
    logger.info("serving", host=settings.host, port=settings.port, provider=settings.provider)
    uvicorn.run(create_app(), host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    serve()
