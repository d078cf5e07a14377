"""
FastAPI 애플리케이션 진입점.

실행:
- 개발: uv run uvicorn src.app.main:app --reload --port 3000
- 프로덕션: uv run uvicorn src.app.main:app --port 3000
- 다른 설정 파일: COFFEE_CONFIG=/path/to/config.yaml
"""

import copy
import logging
import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import yaml
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from src.app.routes import account, auth, pages
from src.app.services.credentials import CredentialVerifier
from src.app.services.sessions import SessionManager
from src.app.services.uploads import UploadHandler, ensure_uploads_dir
from src.core.logging import configure_logging
from src.core.store import UserStore
from src.domain.constants import UPLOADS_URL_PREFIX

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).parent.parent.parent
CONFIG_ENV_VAR = "COFFEE_CONFIG"

# =============================================================================
# Configuration
# =============================================================================

DEFAULT_CONFIG: dict[str, Any] = {
    "app": {"title": "Coffee House"},
    "server": {"host": "127.0.0.1", "port": 3000},
    "paths": {
        "data_dir": "data",
        "uploads_dir": "public/uploads",
        "lock_file": "store.lock",
    },
    "store": {"lock_timeout": 5.0},
    "session": {"cookie_name": "coffee_session", "ttl_seconds": 86400, "secure": False},
    "logging": {"level": "INFO"},
}


def _deep_merge(base: dict, override: dict) -> dict:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(config_path: Path | None = None) -> dict:
    """
    설정 파일 로드.

    우선순위: 인자 > COFFEE_CONFIG 환경변수 > 프로젝트 루트 default.yaml
    파일에 없는 키는 DEFAULT_CONFIG 값 사용.
    """
    if config_path is None:
        env_path = os.getenv(CONFIG_ENV_VAR)
        config_path = Path(env_path) if env_path else PROJECT_ROOT / "default.yaml"

    if not config_path.exists():
        return copy.deepcopy(DEFAULT_CONFIG)

    with open(config_path, encoding="utf-8") as f:
        data: dict[Any, Any] = yaml.safe_load(f) or {}

    return _deep_merge(DEFAULT_CONFIG, data)


def resolve_path(value: str | Path, root: Path = PROJECT_ROOT) -> Path:
    """상대 경로는 프로젝트 루트 기준."""
    path = Path(value)
    return path if path.is_absolute() else root / path


# =============================================================================
# App State
# =============================================================================


def init_app_state(app: FastAPI, config: dict) -> None:
    """
    저장소/세션/업로드 서비스를 app.state에 구성.

    - 업로드 디렉터리 보장 (멱등) + /uploads 마운트
    - lifespan과 테스트에서 공용
    """
    paths = config.get("paths", {})
    data_dir = resolve_path(paths.get("data_dir", "data"))
    uploads_dir = ensure_uploads_dir(resolve_path(paths.get("uploads_dir", "public/uploads")))

    store = UserStore(data_dir, config)
    sessions = SessionManager(
        data_dir,
        store,
        ttl_seconds=int(config.get("session", {}).get("ttl_seconds", 86400)),
    )

    app.state.config = config
    app.state.store = store
    app.state.sessions = sessions
    app.state.verifier = CredentialVerifier(store)
    app.state.uploads = UploadHandler(uploads_dir, UPLOADS_URL_PREFIX)

    # 재초기화 시 이전 마운트 교체
    app.router.routes = [
        route for route in app.router.routes
        if getattr(route, "name", None) != "uploads"
    ]
    app.mount(UPLOADS_URL_PREFIX, StaticFiles(directory=uploads_dir), name="uploads")

    logger.info(f"Data dir: {data_dir}, uploads dir: {uploads_dir}")


# =============================================================================
# Lifespan
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    애플리케이션 생명주기 관리.

    시작 시: 설정 로드, 로깅 설정, 서비스 초기화
    """
    config = load_config()
    configure_logging(config)
    init_app_state(app, config)

    yield


# =============================================================================
# App Instance
# =============================================================================

app = FastAPI(
    title="Coffee House",
    description="회원가입/로그인, 정적 페이지, 프로필/아바타 업로드",
    version="0.1.0",
    lifespan=lifespan,
)

# Static files (CSS)
static_dir = Path(__file__).parent / "static"
if static_dir.exists():
    app.mount("/static", StaticFiles(directory=static_dir), name="static")

# =============================================================================
# Routes
# =============================================================================

app.include_router(pages.router, tags=["Pages"])
app.include_router(auth.router, tags=["Auth"])
app.include_router(account.router, tags=["Account"])


@app.get("/health")
async def health() -> dict[str, str]:
    """헬스 체크."""
    return {"status": "ok"}


# =============================================================================
# CLI Entry Point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    server_config = load_config().get("server", {})
    uvicorn.run(
        "src.app.main:app",
        host=server_config.get("host", "127.0.0.1"),
        port=int(server_config.get("port", 3000)),
    )
