"""
Application Services.

역할:
- credentials: username/password 확인 (평문 비교)
- sessions: 세션 토큰 ↔ 사용자
- uploads: 아바타 파일 저장
- flows: 라우트별 흐름 (컨텍스트 → Redirect/Render)
"""

from .credentials import CredentialVerifier
from .sessions import SessionManager
from .uploads import AvatarUpload, UploadHandler

__all__ = [
    "CredentialVerifier",
    "SessionManager",
    "AvatarUpload",
    "UploadHandler",
]
