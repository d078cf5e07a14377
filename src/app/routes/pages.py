"""
Page Routes: 공개 페이지 (인증 불필요).

- GET / → 홈
- GET /error → 에러 페이지 (?msg=)
- GET /gallery, /about, /blog, /contact, /menu → 정적 페이지

어떤 경우에도 저장소 상태를 바꾸지 않는다.
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from src.app.deps import get_context
from src.app.services.flows import RequestContext, error_page, render
from src.app.views import respond
from src.domain.constants import STATIC_PAGES

router = APIRouter()


@router.get("/", response_class=HTMLResponse)
async def home(request: Request, ctx: RequestContext = Depends(get_context)):
    """홈 페이지."""
    return respond(request, render(ctx, "index"))


@router.get("/error", response_class=HTMLResponse)
async def error(
    request: Request,
    msg: str | None = None,
    ctx: RequestContext = Depends(get_context),
):
    """에러 페이지 (메시지는 쿼리스트링에서)."""
    return respond(request, error_page(ctx, msg))


def _static_page_endpoint(template: str):
    async def static_page(request: Request, ctx: RequestContext = Depends(get_context)):
        return respond(request, render(ctx, template))

    static_page.__name__ = f"{template}_page"
    return static_page


for _path, _template in STATIC_PAGES.items():
    router.add_api_route(
        _path,
        _static_page_endpoint(_template),
        methods=["GET"],
        response_class=HTMLResponse,
    )
