from __future__ import annotations

import uuid

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from aiprompts.api.dependencies import get_orchestrator
from aiprompts.pipeline.guard import PromptRequest
from aiprompts.pipeline.service import handle_prompt_request
from aiprompts.utils.logging import bind_request_context, clear_request_context


DEFAULT_ROUTE = "/aiPrompts"

# Every method reaches the handler so a wrong one gets the uniform 405 error body.
_ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


async def ai_prompts(request: Request) -> JSONResponse:
    bind_request_context(request_id=uuid.uuid4().hex, mode=request.query_params.get("mode"))
    try:
        prompt_request = PromptRequest(
            method=request.method,
            content_type=request.headers.get("content-type"),
            body=await request.body(),
            query=dict(request.query_params),
        )
        # The provider call blocks; keep it off the event loop.
        status_code, body = await run_in_threadpool(
            handle_prompt_request, prompt_request, lambda: get_orchestrator(request)
        )
        return JSONResponse(status_code=status_code, content=body)
    finally:
        clear_request_context()


def build_router(path: str = DEFAULT_ROUTE) -> APIRouter:
    router = APIRouter()
    router.add_api_route(path, ai_prompts, methods=_ALL_METHODS, response_class=JSONResponse)
    return router
