"""
Views: 응답 의도 → HTTP 응답

- Render → Jinja2 템플릿 (src/app/templates/<name>.html)
- Redirect → 302 + 세션 쿠키 설정/삭제
"""

from pathlib import Path
from typing import Any

from fastapi import Request, status
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from fastapi.templating import Jinja2Templates

from src.app.deps import get_config, session_cookie_name
from src.app.services.flows import Intent, Render

# Jinja2 템플릿 설정
templates_dir = Path(__file__).parent / "templates"
jinja_templates = Jinja2Templates(directory=templates_dir)


def set_session_cookie(response: Response, config: dict[str, Any], token: str) -> None:
    session_config = config.get("session", {})
    response.set_cookie(
        key=session_cookie_name(config),
        value=token,
        max_age=int(session_config.get("ttl_seconds", 60 * 60 * 24)),
        httponly=True,
        secure=bool(session_config.get("secure", False)),
        samesite="lax",
        path="/",
    )


def clear_session_cookie(response: Response, config: dict[str, Any]) -> None:
    response.delete_cookie(session_cookie_name(config), path="/")


def respond(request: Request, intent: Intent) -> Response:
    """응답 의도를 실제 응답으로 변환."""
    if isinstance(intent, Render):
        return render_template(request, intent)

    config = get_config(request)
    response = RedirectResponse(url=intent.location, status_code=status.HTTP_302_FOUND)
    if intent.set_session:
        set_session_cookie(response, config, intent.set_session)
    elif intent.clear_session:
        clear_session_cookie(response, config)
    return response


def render_template(request: Request, intent: Render) -> HTMLResponse:
    return jinja_templates.TemplateResponse(
        request,
        f"{intent.template}.html",
        {
            "app_title": get_config(request).get("app", {}).get("title", "Coffee House"),
            **intent.context,
        },
    )
