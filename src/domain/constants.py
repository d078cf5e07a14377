"""
Domain Constants: 앱 전역 상수.

경로, 쿠키, 에러 메시지 등 시스템 전반에서 사용되는 값들.
"""

from urllib.parse import quote

# =============================================================================
# Store Directory Structure (저장소 디렉토리 구조)
# =============================================================================
# data/
# ├── users/
# │   ├── <user_id>.json
# │   └── _usernames/<sha256(username)>.json   # unique index (O_EXCL)
# └── sessions/<sha256(token)>.json

USERS_DIR = "users"
USERNAME_INDEX_DIR = "_usernames"
SESSIONS_DIR = "sessions"

# =============================================================================
# Uploads
# =============================================================================

AVATAR_FIELD = "avatar"
UPLOADS_URL_PREFIX = "/uploads"

# =============================================================================
# Routes
# =============================================================================

LOGIN_PATH = "/login"
ERROR_PATH = "/error"

# GET 경로 → 템플릿 이름 (정적 페이지)
STATIC_PAGES = {
    "/gallery": "gallery",
    "/about": "about",
    "/blog": "blogs",
    "/contact": "contact",
    "/menu": "menu",
}

# =============================================================================
# Error Messages (/error?msg=...)
# =============================================================================

DEFAULT_ERROR_MESSAGE = "An error occurred."
MSG_LOGIN_FAILED = "Login failed"
MSG_USER_EXISTS = "User already exists"
MSG_REGISTRATION_ERROR = "Registration error"
MSG_SETTINGS_FAILED = "Settings update failed"
MSG_PROFILE_FAILED = "Profile update failed"


def error_location(message: str) -> str:
    """
    /error 리다이렉트 경로 생성.

    공백은 %20으로 인코딩 (예: /error?msg=Login%20failed)
    """
    return f"{ERROR_PATH}?msg={quote(message)}"
