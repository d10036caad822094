from __future__ import annotations

import os
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from aiprompts.api.dependencies import build_provider
from aiprompts.api.errors import (
    APIError,
    api_error_handler,
    http_error_handler,
    pipeline_error_handler,
    unhandled_error_handler,
    validation_error_handler,
)
from aiprompts.config.load_config import AppConfig, load_app_config
from aiprompts.llm.openai_compat import LLMConfigError
from aiprompts.pipeline.errors import PipelineError
from aiprompts.utils.logging import configure_logging

from .routers.health import router as health_router
from .routers.prompts import build_router as build_prompts_router


log = structlog.get_logger("aiprompts.app")


def _cors_origins_from_env() -> list[str]:
    raw = os.getenv("AIPROMPTS_CORS_ORIGINS", "").strip()
    if not raw:
        # Safe local defaults: allow typical dev ports.
        return [
            "http://localhost:3000",
            "http://127.0.0.1:3000",
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ]
    return [o.strip() for o in raw.split(",") if o.strip()]


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    v = raw.strip().lower()
    if v in {"1", "true", "yes", "y", "on"}:
        return True
    if v in {"0", "false", "no", "n", "off"}:
        return False
    return default


def create_app(config: AppConfig | None = None) -> FastAPI:
    configure_logging()
    cfg = config or load_app_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI):  # noqa: ANN202
        app.state.config = cfg
        # The provider client is the only process-lifetime object.
        if getattr(app.state, "provider", None) is None and _env_bool("AIPROMPTS_INIT_PROVIDER_ON_STARTUP", True):
            try:
                app.state.provider = build_provider(cfg)
                log.info("provider_ready", model=cfg.llm.model, base_url=cfg.llm.base_url)
            except LLMConfigError as e:
                # Requests that pass validation will fail with a 500 until a key is configured.
                log.warning("provider_unavailable", error=str(e))
        try:
            yield
        finally:
            app.state.provider = None

    app = FastAPI(title="AI Prompts API", version="0.1.0", lifespan=lifespan)
    app.state.config = cfg
    app.state.provider = None

    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(PipelineError, pipeline_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_origins_from_env(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health_router, tags=["system"])
    app.include_router(build_prompts_router(cfg.server.route), tags=["prompts"])

    return app


app = create_app()
