from __future__ import annotations

import threading

from fastapi import Request

from aiprompts.api.errors import APIError
from aiprompts.config.load_config import AppConfig, ConfigError, load_app_config
from aiprompts.llm.openai_compat import LLMConfigError, OpenAICompatibleGenerationClient
from aiprompts.llm.provider import GenerationProvider
from aiprompts.pipeline.generation import GenerationOrchestrator


_PROVIDER_INIT_LOCK = threading.Lock()


def build_provider(cfg: AppConfig) -> OpenAICompatibleGenerationClient:
    return OpenAICompatibleGenerationClient(
        base_url=cfg.llm.base_url,
        api_key=cfg.llm.api_key,
        model=cfg.llm.model,
        temperature=cfg.llm.temperature,
        timeout_s=cfg.llm.timeout_s,
    )


def get_app_config(request: Request) -> AppConfig:
    cached = getattr(request.app.state, "config", None)
    if isinstance(cached, AppConfig):
        return cached
    try:
        cfg = load_app_config()
    except ConfigError as e:
        raise APIError(status_code=500, reasoning=str(e)) from e
    request.app.state.config = cfg
    return cfg


def get_provider(request: Request) -> GenerationProvider:
    """Return the process-wide provider client (lazy init).

    The app lifespan normally creates it at startup; the lock covers the case
    where startup could not (e.g. the key was added later) or was disabled.
    """
    cached = getattr(request.app.state, "provider", None)
    if cached is not None:
        return cached

    with _PROVIDER_INIT_LOCK:
        cached2 = getattr(request.app.state, "provider", None)
        if cached2 is not None:
            return cached2

        cfg = get_app_config(request)
        try:
            provider = build_provider(cfg)
        except LLMConfigError as e:
            raise APIError(status_code=500, reasoning="Error while generating response.") from e

        request.app.state.provider = provider
        return provider


def get_orchestrator(request: Request) -> GenerationOrchestrator:
    # Built per request; the provider underneath is shared.
    cfg = get_app_config(request)
    return GenerationOrchestrator(get_provider(request), max_attempts=cfg.generation.max_attempts)
