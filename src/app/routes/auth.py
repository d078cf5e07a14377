"""
Auth Routes: 회원가입/로그인/로그아웃.

- GET /login → 로그인 폼
- POST /login → 자격 증명 확인 + 세션 시작
- GET /register → 회원가입 폼
- POST /register → 사용자 생성
- GET /logout → 세션 종료
"""

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse

from src.app.deps import get_context, get_sessions, get_store, get_verifier
from src.app.services import flows
from src.app.services.flows import RequestContext
from src.app.views import respond

router = APIRouter()


@router.get("/login", response_class=HTMLResponse)
async def login_page(request: Request, ctx: RequestContext = Depends(get_context)):
    """로그인 화면."""
    return respond(request, flows.render(ctx, "login", error=None))


@router.post("/login")
async def login(
    request: Request,
    username: str | None = Form(None),
    password: str | None = Form(None),
    ctx: RequestContext = Depends(get_context),
):
    """로그인 처리 → "/" 또는 /error?msg=Login%20failed."""
    intent = flows.login(
        ctx,
        get_verifier(request),
        get_sessions(request),
        username,
        password,
    )
    return respond(request, intent)


@router.get("/register", response_class=HTMLResponse)
async def register_page(request: Request, ctx: RequestContext = Depends(get_context)):
    """회원가입 화면."""
    return respond(request, flows.render(ctx, "register", error=None))


@router.post("/register")
async def register(
    request: Request,
    username: str | None = Form(None),
    password: str | None = Form(None),
    ctx: RequestContext = Depends(get_context),
):
    """회원가입 처리 → /login 또는 /error."""
    return respond(request, flows.register(ctx, get_store(request), username, password))


@router.get("/logout")
async def logout(request: Request, ctx: RequestContext = Depends(get_context)):
    """로그아웃 (세션이 없어도 "/"로)."""
    return respond(request, flows.logout(ctx, get_sessions(request)))
