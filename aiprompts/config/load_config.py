from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from dotenv import load_dotenv


class ConfigError(RuntimeError):
    pass


def _as_int(value: Any, *, key: str) -> int:
    try:
        return int(value)
    except Exception as e:
        raise ConfigError(f"Invalid int for {key}: {value!r}") from e


def _as_str(value: Any, *, key: str) -> str:
    if value is None:
        raise ConfigError(f"Missing required config key: {key}")
    return str(value)


def _as_float(value: Any, *, key: str) -> float:
    try:
        return float(value)
    except Exception as e:
        raise ConfigError(f"Invalid float for {key}: {value!r}") from e


def _as_section(raw: dict[str, Any], name: str) -> dict[str, Any]:
    section = raw.get(name, {})
    if not isinstance(section, dict):
        raise ConfigError(f"Invalid section [{name}]: expected a table")
    return section


@dataclass(frozen=True)
class LLMConfig:
    base_url: str
    model: str
    temperature: float
    timeout_s: float
    # Never read from the TOML file; secrets come from the environment only.
    api_key: str | None


@dataclass(frozen=True)
class GenerationConfig:
    max_attempts: int


@dataclass(frozen=True)
class ServerConfig:
    region: str
    route: str
    host: str = "127.0.0.1"
    port: int = 8000


@dataclass(frozen=True)
class AppConfig:
    llm: LLMConfig
    generation: GenerationConfig
    server: ServerConfig


def default_config_path() -> Path:
    return Path(os.getenv("AIPROMPTS_CONFIG_PATH", "config/default.toml")).expanduser().resolve()


def _read_toml(cfg_path: Path) -> dict[str, Any]:
    try:
        import tomllib  # py3.11+
    except Exception as e:
        raise ConfigError("tomllib is required (Python 3.11+).") from e

    try:
        return tomllib.loads(cfg_path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {cfg_path}: {e}") from e


def load_app_config(path: Path | None = None) -> AppConfig:
    """Load settings from TOML, then apply environment overrides.

    A missing config file is not an error: built-in defaults apply, so the
    service only needs an API key to start. `.env` in the working directory is
    loaded first and never overrides variables already set in the process.
    """
    load_dotenv()

    cfg_path = path or default_config_path()
    raw: dict[str, Any] = _read_toml(cfg_path) if cfg_path.exists() else {}

    llm = _as_section(raw, "llm")
    generation = _as_section(raw, "generation")
    server = _as_section(raw, "server")

    base_url = (
        os.getenv("OPENAI_API_BASE")
        or os.getenv("OPENAI_BASE_URL")
        or llm.get("base_url")
        or "https://api.openai.com/v1"
    )
    model = os.getenv("LLM_MODEL") or os.getenv("OPENAI_MODEL") or llm.get("model") or "gpt-4o-mini"
    api_key = os.getenv("AIPROMPTS_API_KEY") or os.getenv("OPENAI_API_KEY") or None

    max_attempts = _as_int(generation.get("max_attempts", 3), key="generation.max_attempts")
    if max_attempts < 1:
        raise ConfigError(f"Invalid generation.max_attempts: must be >= 1, got {max_attempts}")

    timeout_s = _as_float(llm.get("timeout_s", 60.0), key="llm.timeout_s")
    if timeout_s <= 0:
        raise ConfigError(f"Invalid llm.timeout_s: must be > 0, got {timeout_s}")

    port = _as_int(os.getenv("AIPROMPTS_PORT") or server.get("port", 8000), key="server.port")
    if not 0 < port < 65536:
        raise ConfigError(f"Invalid server.port: must be in 1..65535, got {port}")

    return AppConfig(
        llm=LLMConfig(
            base_url=_as_str(base_url, key="llm.base_url"),
            model=_as_str(model, key="llm.model"),
            temperature=_as_float(llm.get("temperature", 0.1), key="llm.temperature"),
            timeout_s=timeout_s,
            api_key=api_key,
        ),
        generation=GenerationConfig(max_attempts=max_attempts),
        server=ServerConfig(
            region=_as_str(server.get("region", "europe-west1"), key="server.region"),
            route=_as_str(server.get("route", "/aiPrompts"), key="server.route"),
            host=_as_str(os.getenv("AIPROMPTS_HOST") or server.get("host", "127.0.0.1"), key="server.host"),
            port=port,
        ),
    )
