from __future__ import annotations

from pathlib import Path

import pytest

from aiprompts.config.load_config import ConfigError, load_app_config


_ENV_KEYS = (
    "OPENAI_API_BASE",
    "OPENAI_BASE_URL",
    "LLM_MODEL",
    "OPENAI_MODEL",
    "AIPROMPTS_API_KEY",
    "OPENAI_API_KEY",
    "AIPROMPTS_HOST",
    "AIPROMPTS_PORT",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_missing_file_uses_defaults(tmp_path: Path) -> None:
    cfg = load_app_config(tmp_path / "absent.toml")
    assert cfg.generation.max_attempts == 3
    assert cfg.llm.temperature == pytest.approx(0.1)
    assert cfg.llm.timeout_s == pytest.approx(60.0)
    assert cfg.llm.api_key is None
    assert cfg.server.route == "/aiPrompts"
    assert cfg.server.region == "europe-west1"
    assert (cfg.server.host, cfg.server.port) == ("127.0.0.1", 8000)


def test_repo_default_config_loads() -> None:
    cfg = load_app_config(Path(__file__).resolve().parents[1] / "config" / "default.toml")
    assert cfg.generation.max_attempts == 3
    assert cfg.llm.base_url.startswith("https://")


def test_file_values_and_env_overrides(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = tmp_path / "cfg.toml"
    path.write_text(
        '[llm]\nbase_url = "http://file.invalid/v1"\nmodel = "file-model"\ntemperature = 0.3\ntimeout_s = 12\n'
        "[generation]\nmax_attempts = 5\n",
        encoding="utf-8",
    )
    cfg = load_app_config(path)
    assert cfg.llm.base_url == "http://file.invalid/v1"
    assert cfg.llm.model == "file-model"
    assert cfg.llm.temperature == pytest.approx(0.3)
    assert cfg.llm.timeout_s == pytest.approx(12.0)
    assert cfg.generation.max_attempts == 5

    monkeypatch.setenv("OPENAI_BASE_URL", "http://env.invalid/v1")
    monkeypatch.setenv("OPENAI_MODEL", "env-model")
    monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
    cfg = load_app_config(path)
    assert cfg.llm.base_url == "http://env.invalid/v1"
    assert cfg.llm.model == "env-model"
    assert cfg.llm.api_key == "sk-env"


def test_bind_address_from_file_and_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = tmp_path / "cfg.toml"
    path.write_text('[server]\nhost = "0.0.0.0"\nport = 9000\n', encoding="utf-8")
    cfg = load_app_config(path)
    assert (cfg.server.host, cfg.server.port) == ("0.0.0.0", 9000)

    monkeypatch.setenv("AIPROMPTS_HOST", "10.0.0.5")
    monkeypatch.setenv("AIPROMPTS_PORT", "8081")
    cfg = load_app_config(path)
    assert (cfg.server.host, cfg.server.port) == ("10.0.0.5", 8081)


@pytest.mark.parametrize(
    "body",
    [
        "[generation]\nmax_attempts = 0\n",
        '[generation]\nmax_attempts = "many"\n',
        "[llm]\ntimeout_s = -1\n",
        "[server]\nport = 70000\n",
        "llm = 3\n",
        "not = valid = toml\n",
    ],
)
def test_invalid_values_raise(tmp_path: Path, body: str) -> None:
    path = tmp_path / "bad.toml"
    path.write_text(body, encoding="utf-8")
    with pytest.raises(ConfigError):
        load_app_config(path)
