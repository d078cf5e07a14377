"""
Pytest fixtures for the web app tests.

구성:
- 모든 데이터/업로드는 tmp_path 아래 (프로젝트 data/ 건드리지 않음)
- app fixture: 라우터 + init_app_state로 구성한 FastAPI 앱
"""

from collections.abc import Generator
from pathlib import Path

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.app.main import DEFAULT_CONFIG, _deep_merge, init_app_state
from src.app.routes import account, auth, pages
from src.core.store import UserStore

# =============================================================================
# Path / Config Fixtures
# =============================================================================

@pytest.fixture
def project_root() -> Path:
    """프로젝트 루트 경로."""
    return Path(__file__).parent.parent


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """테스트용 데이터 디렉터리."""
    path = tmp_path / "data"
    path.mkdir()
    return path


@pytest.fixture
def uploads_dir(tmp_path: Path) -> Path:
    """테스트용 업로드 디렉터리 (init_app_state가 생성)."""
    return tmp_path / "public" / "uploads"


@pytest.fixture
def test_config(data_dir: Path, uploads_dir: Path) -> dict:
    """테스트용 설정."""
    return _deep_merge(
        DEFAULT_CONFIG,
        {
            "paths": {
                "data_dir": str(data_dir),
                "uploads_dir": str(uploads_dir),
            },
            "store": {
                "lock_timeout": 0.2,
            },
        },
    )


@pytest.fixture
def store(data_dir: Path, test_config: dict) -> UserStore:
    """빈 사용자 저장소."""
    return UserStore(data_dir, test_config)


# =============================================================================
# App Fixtures
# =============================================================================

@pytest.fixture
def app(test_config: dict) -> FastAPI:
    """테스트용 FastAPI 앱."""
    app = FastAPI()
    app.include_router(pages.router)
    app.include_router(auth.router)
    app.include_router(account.router)
    init_app_state(app, test_config)
    return app


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    """테스트 클라이언트 (리다이렉트 자동 추적 안 함)."""
    with TestClient(app, follow_redirects=False) as client:
        yield client


def register(client: TestClient, username: str, password: str):
    return client.post("/register", data={"username": username, "password": password})


def login(client: TestClient, username: str, password: str):
    return client.post("/login", data={"username": username, "password": password})


@pytest.fixture
def alice(client: TestClient, app: FastAPI):
    """가입된 사용자 alice / pw-alice."""
    response = register(client, "alice", "pw-alice")
    assert response.status_code == 302
    return app.state.store.find_by_username("alice")


@pytest.fixture
def logged_in(client: TestClient, alice) -> TestClient:
    """alice로 로그인된 클라이언트."""
    response = login(client, "alice", "pw-alice")
    assert response.headers["location"] == "/"
    return client
