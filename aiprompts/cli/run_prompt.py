from __future__ import annotations

import argparse
import json
import sys

from aiprompts.api.dependencies import build_provider
from aiprompts.config.load_config import ConfigError, load_app_config
from aiprompts.llm.openai_compat import LLMConfigError
from aiprompts.pipeline.generation import GenerationOrchestrator
from aiprompts.pipeline.guard import JSON_CONTENT_TYPE, PromptRequest
from aiprompts.pipeline.prompts import available_modes
from aiprompts.pipeline.service import handle_prompt_request
from aiprompts.utils.logging import configure_logging


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run one journal entry through the prompt pipeline.")
    parser.add_argument(
        "--mode",
        default="summary",
        help=f"Prompt mode (one of: {', '.join(available_modes())}).",
    )
    parser.add_argument(
        "--data",
        required=True,
        help="Journal text to analyse. Use '-' to read it from stdin.",
    )
    parser.add_argument(
        "--max-attempts",
        type=int,
        default=0,
        help="Override generation.max_attempts from the config file.",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv if argv is not None else sys.argv[1:])
    # stdout carries the JSON result only.
    configure_logging(stream=sys.stderr, force=True)

    try:
        cfg = load_app_config()
    except ConfigError as e:
        print(str(e), file=sys.stderr)
        return 2

    data = sys.stdin.read() if args.data == "-" else args.data
    max_attempts = int(args.max_attempts) if args.max_attempts > 0 else cfg.generation.max_attempts

    def _make_orchestrator() -> GenerationOrchestrator:
        try:
            provider = build_provider(cfg)
        except LLMConfigError as e:
            raise SystemExit(f"LLM client unavailable: {e}") from e
        return GenerationOrchestrator(provider, max_attempts=max_attempts)

    request = PromptRequest(
        method="POST",
        content_type=JSON_CONTENT_TYPE,
        body={"data": data},
        query={"mode": args.mode},
    )
    status_code, body = handle_prompt_request(request, _make_orchestrator)
    print(json.dumps(body, ensure_ascii=False, indent=2))
    return 0 if status_code == 200 else 1


if __name__ == "__main__":
    raise SystemExit(main())
