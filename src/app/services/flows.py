"""
Route Flows: 요청 컨텍스트 → 응답 의도 (Redirect / Render)

HTTP 계층 없이 테스트 가능한 순수 흐름 함수 모음.
라우트는 폼/쿠키를 읽어 여기로 넘기고, 반환된 의도를 응답으로 바꾸기만 한다.

실패 정책:
- 모든 실패 → /error?msg=... 리다이렉트 (재시도 없음)
- 변경은 메모리 User에 적용 후 바뀐 필드 이름과 함께 한 번에 save
  → save 실패 시 해당 요청의 변경 전체 유실 (다음 요청에서 재조회)
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from src.app.services.credentials import CredentialVerifier
from src.app.services.sessions import SessionManager
from src.app.services.uploads import AvatarUpload, UploadHandler
from src.core.logging import describe_error
from src.core.store import UserStore
from src.domain.constants import (
    DEFAULT_ERROR_MESSAGE,
    LOGIN_PATH,
    MSG_LOGIN_FAILED,
    MSG_PROFILE_FAILED,
    MSG_REGISTRATION_ERROR,
    MSG_SETTINGS_FAILED,
    MSG_USER_EXISTS,
    error_location,
)
from src.domain.errors import AuthFailure, DuplicateKey, PersistenceError, UploadError
from src.domain.schemas import User

logger = logging.getLogger(__name__)

# =============================================================================
# Request Context / Response Intents
# =============================================================================


@dataclass
class RequestContext:
    """
    요청 단위 인증 상태.

    전역 상태 대신 핸들러마다 명시적으로 전달.
    """
    user: User | None = None
    session_token: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None


@dataclass
class Redirect:
    """302 리다이렉트 의도."""
    location: str
    set_session: str | None = None  # 새 세션 토큰 (쿠키 설정)
    clear_session: bool = False  # 세션 쿠키 삭제


@dataclass
class Render:
    """템플릿 렌더 의도."""
    template: str
    context: dict[str, Any] = field(default_factory=dict)


Intent = Redirect | Render


def render(ctx: RequestContext, template: str, **extra: Any) -> Render:
    """모든 뷰에 현재 사용자(user)를 넘긴다."""
    return Render(template=template, context={"user": ctx.user, **extra})


# =============================================================================
# Auth Gate
# =============================================================================


def guard(ctx: RequestContext) -> Redirect | None:
    """
    보호 라우트 검사.

    Returns:
        None: 통과
        Redirect("/login"): 미인증
    """
    if ctx.is_authenticated:
        return None
    return Redirect(LOGIN_PATH)


# =============================================================================
# Public Pages
# =============================================================================


def error_page(ctx: RequestContext, msg: str | None) -> Render:
    return render(ctx, "error", message=msg or DEFAULT_ERROR_MESSAGE)


# =============================================================================
# Auth Flows
# =============================================================================


def login(
    ctx: RequestContext,
    verifier: CredentialVerifier,
    sessions: SessionManager,
    username: str | None,
    password: str | None,
) -> Redirect:
    """
    POST /login.

    성공: 세션 시작 → "/"
    실패: /error?msg=Login%20failed (세션 없음)
    """
    try:
        user = verifier.verify(username, password)
        token = sessions.start(user)
    except AuthFailure as e:
        logger.info(f"Login failed for {username!r}: {e.reason}")
        return Redirect(error_location(MSG_LOGIN_FAILED))
    except PersistenceError as e:
        logger.error(f"Login failed for {username!r}: {describe_error(e)}")
        return Redirect(error_location(MSG_LOGIN_FAILED))

    # 기존 세션은 새 세션으로 교체
    if ctx.session_token:
        sessions.end(ctx.session_token)

    logger.info(f"User {user.username!r} logged in")
    return Redirect("/", set_session=token)


def register(
    ctx: RequestContext,
    store: UserStore,
    username: str | None,
    password: str | None,
) -> Redirect:
    """
    POST /register.

    username 사전 확인은 UX용 지름길일 뿐이고,
    경합 시에는 저장소의 DuplicateKey가 최종 판정한다.
    """
    if not username or not password:
        return Redirect(error_location(MSG_REGISTRATION_ERROR))

    try:
        if store.find_by_username(username) is not None:
            return Redirect(error_location(MSG_USER_EXISTS))
        user = store.create(username=username, password=password)
    except DuplicateKey:
        logger.info(f"Registration race lost for {username!r}")
        return Redirect(error_location(MSG_USER_EXISTS))
    except PersistenceError as e:
        logger.error(f"Registration failed for {username!r}: {describe_error(e)}")
        return Redirect(error_location(MSG_REGISTRATION_ERROR))

    logger.info(f"Registered user {user.username!r} ({user.id})")
    return Redirect(LOGIN_PATH)


def logout(ctx: RequestContext, sessions: SessionManager) -> Redirect:
    """GET /logout (세션 없어도 "/"로)."""
    if ctx.session_token:
        sessions.end(ctx.session_token)
        if ctx.user is not None:
            logger.info(f"User {ctx.user.username!r} logged out")
    return Redirect("/", clear_session=True)


# =============================================================================
# Account Flows (인증 필요)
# =============================================================================


def settings_page(ctx: RequestContext) -> Intent:
    return guard(ctx) or render(ctx, "settings")


def profile_page(ctx: RequestContext) -> Intent:
    return guard(ctx) or render(ctx, "profile")


def update_settings(
    ctx: RequestContext,
    store: UserStore,
    uploads: UploadHandler,
    username: str | None,
    password: str | None,
    avatar: AvatarUpload | None,
) -> Redirect:
    """
    POST /settings.

    빈 값은 변경하지 않음. 업로드가 있으면 avatar 갱신.
    """
    user = ctx.user
    if user is None:
        return Redirect(LOGIN_PATH)

    changed: list[str] = []
    try:
        if username:
            user.username = username
            changed.append("username")
        if password:
            user.password = password
            changed.append("password")
        if avatar is not None:
            user.avatar = uploads.handle(avatar, user)
            changed.append("avatar")
        if changed:
            store.save(user, changed)
    except (PersistenceError, UploadError) as e:
        logger.error(f"Settings update failed for {user.id}: {describe_error(e)}")
        return Redirect(error_location(MSG_SETTINGS_FAILED))

    return Redirect("/settings")


def update_profile(
    ctx: RequestContext,
    store: UserStore,
    uploads: UploadHandler,
    username: str | None,
    email: str | None,
    avatar: AvatarUpload | None,
) -> Redirect:
    """
    POST /profile/update.

    빈 값은 변경하지 않음. 업로드가 있으면 avatar_url 갱신.
    """
    user = ctx.user
    if user is None:
        return Redirect(LOGIN_PATH)

    changed: list[str] = []
    try:
        if username:
            user.username = username
            changed.append("username")
        if email:
            user.email = email
            changed.append("email")
        if avatar is not None:
            user.avatar_url = uploads.handle(avatar, user)
            changed.append("avatar_url")
        if changed:
            store.save(user, changed)
    except (PersistenceError, UploadError) as e:
        logger.error(f"Profile update failed for {user.id}: {describe_error(e)}")
        return Redirect(error_location(MSG_PROFILE_FAILED))

    return Redirect("/profile")
