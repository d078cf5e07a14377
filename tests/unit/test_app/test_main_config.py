"""
test_main_config.py - 설정 로드 / 앱 상태 초기화 테스트

- load_config: 인자 > COFFEE_CONFIG > default.yaml, 누락 키는 기본값
- resolve_path: 상대 경로는 프로젝트 루트 기준
- init_app_state: 서비스 구성, 재초기화 시 /uploads 마운트 교체
"""

from pathlib import Path

import pytest
from fastapi import FastAPI

from src.app.main import (
    CONFIG_ENV_VAR,
    DEFAULT_CONFIG,
    PROJECT_ROOT,
    _deep_merge,
    init_app_state,
    load_config,
    resolve_path,
)


class TestLoadConfig:
    """load_config 테스트."""

    def test_explicit_path_merged_with_defaults(self, tmp_path: Path):
        config_file = tmp_path / "custom.yaml"
        config_file.write_text("session:\n  ttl_seconds: 60\n", encoding="utf-8")

        config = load_config(config_file)

        assert config["session"]["ttl_seconds"] == 60
        assert config["session"]["cookie_name"] == "coffee_session"
        assert config["paths"] == DEFAULT_CONFIG["paths"]

    def test_env_var(self, tmp_path: Path, monkeypatch):
        config_file = tmp_path / "env.yaml"
        config_file.write_text("app:\n  title: Env Cafe\n", encoding="utf-8")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(config_file))

        assert load_config()["app"]["title"] == "Env Cafe"

    def test_missing_file_returns_defaults(self, tmp_path: Path):
        config = load_config(tmp_path / "absent.yaml")

        assert config == DEFAULT_CONFIG
        assert config is not DEFAULT_CONFIG

    def test_empty_file_returns_defaults(self, tmp_path: Path):
        config_file = tmp_path / "empty.yaml"
        config_file.write_text("", encoding="utf-8")

        assert load_config(config_file) == DEFAULT_CONFIG

    def test_project_default_yaml(self, monkeypatch):
        monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)

        config = load_config()

        assert config["server"]["port"] == 3000
        assert config["paths"]["uploads_dir"] == "public/uploads"


class TestDeepMerge:
    """_deep_merge 테스트."""

    def test_nested_override(self):
        merged = _deep_merge({"a": {"x": 1, "y": 2}, "b": 1}, {"a": {"y": 3}})

        assert merged == {"a": {"x": 1, "y": 3}, "b": 1}

    def test_base_untouched(self):
        base = {"a": {"x": 1}}

        _deep_merge(base, {"a": {"x": 2}})

        assert base == {"a": {"x": 1}}


class TestResolvePath:
    """resolve_path 테스트."""

    def test_relative(self):
        assert resolve_path("data") == PROJECT_ROOT / "data"

    def test_absolute(self, tmp_path: Path):
        assert resolve_path(str(tmp_path)) == tmp_path


class TestInitAppState:
    """init_app_state 테스트."""

    def test_services_configured(self, test_config: dict, uploads_dir: Path):
        app = FastAPI()

        init_app_state(app, test_config)

        assert uploads_dir.is_dir()
        assert app.state.config is test_config
        assert app.state.sessions.store is app.state.store
        assert app.state.verifier.store is app.state.store
        assert app.state.uploads.uploads_dir == uploads_dir

    def test_session_ttl_from_config(self, test_config: dict):
        app = FastAPI()
        config = _deep_merge(test_config, {"session": {"ttl_seconds": 5}})

        init_app_state(app, config)

        assert app.state.sessions.ttl_seconds == 5

    def test_reinit_replaces_uploads_mount(self, test_config: dict, tmp_path: Path):
        app = FastAPI()
        init_app_state(app, test_config)
        other = _deep_merge(test_config, {"paths": {"uploads_dir": str(tmp_path / "other")}})

        init_app_state(app, other)

        mounts = [r for r in app.router.routes if getattr(r, "name", None) == "uploads"]
        assert len(mounts) == 1
        assert (tmp_path / "other").is_dir()


@pytest.mark.parametrize("key", ["app", "server", "paths", "store", "session", "logging"])
def test_default_config_sections(key: str):
    assert key in DEFAULT_CONFIG


class TestAppInstance:
    """모듈 레벨 app 테스트 (lifespan 없이)."""

    def test_health(self):
        from fastapi.testclient import TestClient

        from src.app.main import app

        response = TestClient(app).get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_static_css_served(self):
        from fastapi.testclient import TestClient

        from src.app.main import app

        response = TestClient(app).get("/static/css/style.css")

        assert response.status_code == 200
