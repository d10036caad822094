from __future__ import annotations

import argparse
import os
import sys

import uvicorn

from aiprompts.config.load_config import ConfigError, load_app_config


APP_IMPORT_PATH = "aiprompts.api.app:app"


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Serve the journal prompt endpoint with uvicorn.")
    parser.add_argument("--host", default="", help="Override server.host from the config file.")
    parser.add_argument("--port", type=int, default=0, help="Override server.port from the config file.")
    parser.add_argument("--reload", action="store_true", help="Restart on source changes (development only).")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv if argv is not None else sys.argv[1:])

    try:
        cfg = load_app_config()
    except ConfigError as e:
        print(str(e), file=sys.stderr)
        return 2

    # The app module builds its own config and logging on import; only the bind address lives here.
    uvicorn.run(
        APP_IMPORT_PATH,
        host=args.host or cfg.server.host,
        port=args.port if args.port > 0 else cfg.server.port,
        reload=bool(args.reload),
        log_level=os.getenv("AIPROMPTS_LOG_LEVEL", "info").strip().lower(),
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
