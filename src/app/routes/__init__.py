"""
FastAPI Routes.

페이지 라우트 (HTML) + 폼 POST 라우트 (302 리다이렉트)
"""

from . import account, auth, pages

__all__ = ["account", "auth", "pages"]
