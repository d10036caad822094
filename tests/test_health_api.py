from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from aiprompts.api.app import create_app
from aiprompts.config.load_config import AppConfig, GenerationConfig, LLMConfig, ServerConfig


def _config() -> AppConfig:
    return AppConfig(
        llm=LLMConfig(
            base_url="http://llm.invalid/v1",
            model="stub-model",
            temperature=0.1,
            timeout_s=5.0,
            api_key=None,
        ),
        generation=GenerationConfig(max_attempts=3),
        server=ServerConfig(region="europe-west1", route="/aiPrompts"),
    )


def test_healthz(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AIPROMPTS_INIT_PROVIDER_ON_STARTUP", "0")
    with TestClient(create_app(_config())) as client:
        resp = client.get("/healthz")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_version_reports_modes_and_model(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AIPROMPTS_INIT_PROVIDER_ON_STARTUP", "0")
    with TestClient(create_app(_config())) as client:
        resp = client.get("/version")
    assert resp.status_code == 200
    body = resp.json()
    assert body["service"] == "aiprompts"
    assert body["modes"] == ["summary"]
    assert body["region"] == "europe-west1"
    assert body["llm"] == {"model": "stub-model", "ready": False}
    assert "fastapi" in body["deps"]


def test_startup_without_api_key_keeps_serving(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AIPROMPTS_INIT_PROVIDER_ON_STARTUP", "1")
    monkeypatch.delenv("AIPROMPTS_API_KEY", raising=False)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    with TestClient(create_app(_config())) as client:
        resp = client.get("/healthz")
    assert resp.status_code == 200


def test_startup_builds_provider_when_key_present(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AIPROMPTS_INIT_PROVIDER_ON_STARTUP", "1")
    cfg = _config()
    cfg = AppConfig(
        llm=LLMConfig(
            base_url=cfg.llm.base_url,
            model=cfg.llm.model,
            temperature=cfg.llm.temperature,
            timeout_s=cfg.llm.timeout_s,
            api_key="sk-test",
        ),
        generation=cfg.generation,
        server=cfg.server,
    )
    with TestClient(create_app(cfg)) as client:
        resp = client.get("/version")
    assert resp.json()["llm"]["ready"] is True
