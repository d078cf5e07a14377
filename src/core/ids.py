"""
ID 생성: user_id, session token, 인덱스 키

규칙:
- user_id 수정 금지 (생성 시 1회 발급)
- session token은 추측 불가 (secrets)
- 파일명에 그대로 쓰지 않는 값은 sha256으로 변환
"""

import hashlib
import secrets
import time
import uuid


def generate_user_id() -> str:
    """
    User ID 생성.

    포맷: 32자리 hex (UUID v4)
    """
    return uuid.uuid4().hex


def generate_session_token() -> str:
    """세션 토큰 생성 (URL-safe, 256bit)."""
    return secrets.token_urlsafe(32)


def timestamp_identifier() -> str:
    """
    현재 시각 epoch 밀리초 문자열.

    로그인 사용자가 없을 때 업로드 파일명 소유자로 사용.
    """
    return str(int(time.time() * 1000))


def hash_key(value: str) -> str:
    """
    파일명으로 안전한 키 생성.

    username/token 원문을 파일명에 노출하지 않도록 SHA-256 hex 사용.
    """
    return hashlib.sha256(value.encode("utf-8")).hexdigest()
