from __future__ import annotations

import importlib.metadata
import time
from typing import Any

from fastapi import APIRouter
from fastapi import Request

from aiprompts.api.dependencies import get_app_config
from aiprompts.pipeline.prompts import available_modes


router = APIRouter()


def _pkg_version(name: str) -> str | None:
    try:
        return str(importlib.metadata.version(name))
    except importlib.metadata.PackageNotFoundError:
        return None
    except Exception:
        return None


@router.get("/healthz")
def healthz() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/version")
def version(request: Request) -> dict[str, Any]:
    cfg = get_app_config(request)
    provider = getattr(request.app.state, "provider", None)
    return {
        "service": "aiprompts",
        "modes": available_modes(),
        "region": cfg.server.region,
        "llm": {
            "model": cfg.llm.model,
            "ready": provider is not None,
        },
        "deps": {
            "fastapi": _pkg_version("fastapi"),
            "uvicorn": _pkg_version("uvicorn"),
            "openai": _pkg_version("openai"),
            "structlog": _pkg_version("structlog"),
        },
        "ts": time.time(),
    }
