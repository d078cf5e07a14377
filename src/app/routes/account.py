"""
Account Routes: 설정/프로필 (인증 필요).

- GET /settings → 설정 화면
- POST /settings → username/password/avatar 변경
- GET /profile → 프로필 화면
- POST /profile/update → username/email/avatar_url 변경

미인증 요청은 모두 /login으로 리다이렉트.
"""

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from fastapi.responses import HTMLResponse

from src.app.deps import get_context, get_store, get_uploads, read_avatar
from src.app.services import flows
from src.app.services.flows import RequestContext
from src.app.views import respond

router = APIRouter()


@router.get("/settings", response_class=HTMLResponse)
async def settings_page(request: Request, ctx: RequestContext = Depends(get_context)):
    """설정 화면."""
    return respond(request, flows.settings_page(ctx))


@router.post("/settings")
async def update_settings(
    request: Request,
    username: str | None = Form(None),
    password: str | None = Form(None),
    avatar: UploadFile | None = File(None),
    ctx: RequestContext = Depends(get_context),
):
    """설정 변경 → /settings 또는 /error."""
    denied = flows.guard(ctx)
    if denied:
        # 미인증이면 업로드 파일을 저장하지 않음
        return respond(request, denied)

    intent = flows.update_settings(
        ctx,
        get_store(request),
        get_uploads(request),
        username,
        password,
        await read_avatar(avatar),
    )
    return respond(request, intent)


@router.get("/profile", response_class=HTMLResponse)
async def profile_page(request: Request, ctx: RequestContext = Depends(get_context)):
    """프로필 화면."""
    return respond(request, flows.profile_page(ctx))


@router.post("/profile/update")
async def update_profile(
    request: Request,
    username: str | None = Form(None),
    email: str | None = Form(None),
    avatar: UploadFile | None = File(None),
    ctx: RequestContext = Depends(get_context),
):
    """프로필 변경 → /profile 또는 /error."""
    denied = flows.guard(ctx)
    if denied:
        return respond(request, denied)

    intent = flows.update_profile(
        ctx,
        get_store(request),
        get_uploads(request),
        username,
        email,
        await read_avatar(avatar),
    )
    return respond(request, intent)
