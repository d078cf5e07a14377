"""
Request dependencies: app.state 접근 + 요청 컨텍스트

app.state (main.init_app_state에서 설정):
- config, store, sessions, verifier, uploads
"""

import logging
from typing import Any

from fastapi import Request, UploadFile

from src.app.services.credentials import CredentialVerifier
from src.app.services.flows import RequestContext
from src.app.services.sessions import SessionManager
from src.app.services.uploads import AvatarUpload, UploadHandler
from src.core.logging import describe_error
from src.core.store import UserStore
from src.domain.errors import PersistenceError

logger = logging.getLogger(__name__)

DEFAULT_COOKIE_NAME = "coffee_session"


def get_config(request: Request) -> dict[str, Any]:
    return request.app.state.config


def get_store(request: Request) -> UserStore:
    return request.app.state.store


def get_sessions(request: Request) -> SessionManager:
    return request.app.state.sessions


def get_verifier(request: Request) -> CredentialVerifier:
    return request.app.state.verifier


def get_uploads(request: Request) -> UploadHandler:
    return request.app.state.uploads


def session_cookie_name(config: dict[str, Any]) -> str:
    return config.get("session", {}).get("cookie_name", DEFAULT_COOKIE_NAME)


def get_context(request: Request) -> RequestContext:
    """
    세션 쿠키 → RequestContext.

    쿠키가 없거나 세션이 풀리지 않으면 미인증 컨텍스트.
    사용자 레코드 손상 시에도 미인증으로 처리 (로그 남김).
    """
    token = request.cookies.get(session_cookie_name(get_config(request)))
    if not token:
        return RequestContext()

    try:
        user = get_sessions(request).resolve(token)
    except PersistenceError as e:
        logger.error(f"Session resolve failed: {describe_error(e)}")
        user = None

    return RequestContext(user=user, session_token=token)


async def read_avatar(avatar: UploadFile | None) -> AvatarUpload | None:
    """
    multipart avatar 필드 → AvatarUpload.

    파일 선택 없이 제출된 폼(빈 filename)은 업로드 없음.
    """
    if avatar is None or not getattr(avatar, "filename", None):
        return None
    content = await avatar.read()
    return AvatarUpload(filename=avatar.filename, content=content)
