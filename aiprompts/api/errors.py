from __future__ import annotations

from dataclasses import dataclass

import structlog
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from aiprompts.pipeline.errors import PipelineError
from aiprompts.pipeline.response import error_body


log = structlog.get_logger("aiprompts.api")


@dataclass
class APIError(Exception):
    status_code: int
    reasoning: str


def error_response(*, status_code: int, reasoning: str) -> JSONResponse:
    return JSONResponse(status_code=int(status_code), content=error_body(reasoning))


async def api_error_handler(_req: Request, exc: APIError) -> JSONResponse:
    return error_response(status_code=exc.status_code, reasoning=exc.reasoning)


async def pipeline_error_handler(_req: Request, exc: PipelineError) -> JSONResponse:
    return error_response(status_code=exc.status_code, reasoning=exc.reasoning)


async def http_error_handler(_req: Request, exc: StarletteHTTPException) -> JSONResponse:
    # Routing errors (unknown path, method the router refuses) get the same body shape.
    resp = error_response(status_code=exc.status_code, reasoning=str(exc.detail))
    if exc.headers:
        resp.headers.update(exc.headers)
    return resp


async def validation_error_handler(_req: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response(status_code=400, reasoning="Request validation failed.")


async def unhandled_error_handler(_req: Request, exc: Exception) -> JSONResponse:
    # Details stay in the server log; the caller only sees a generic reasoning.
    log.error("unhandled_error", error_type=type(exc).__name__, error=str(exc))
    return error_response(status_code=500, reasoning="Internal server error.")
