"""
Error definitions for the web app.

규칙:
- 조용한 실패 금지 → AppError 계열로 명시적 실패
- 라우트 계층에서만 /error 리다이렉트로 변환
- 재시도 없음 (모든 실패는 해당 요청에서 종료)
"""

from typing import Any


class AppError(Exception):
    """
    앱 공통 에러.

    code + context 형태로 로그/JSON 직렬화가 가능하다.

    Usage:
        raise PersistenceError(ErrorCodes.STORE_WRITE_FAILED, path=str(path))
    """

    def __init__(self, code: str, **context: Any) -> None:
        self.code = code
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        ctx_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
        return f"[{self.code}] {ctx_str}" if ctx_str else f"[{self.code}]"

    def to_dict(self) -> dict[str, Any]:
        """로그/JSON 직렬화용."""
        return {
            "code": self.code,
            **self.context,
        }


class AuthFailure(AppError):
    """
    로그인 실패.

    reason: "unknown user" | "bad credentials" | "missing credentials"
    """

    def __init__(self, reason: str, **context: Any) -> None:
        self.reason = reason
        super().__init__(ErrorCodes.AUTH_FAILED, reason=reason, **context)


class PersistenceError(AppError):
    """저장소 읽기/쓰기 실패."""


class DuplicateKey(PersistenceError):
    """
    unique 필드 충돌 (username).

    create()/save() 양쪽에서 발생할 수 있다.
    """

    def __init__(self, field: str, value: str) -> None:
        super().__init__(ErrorCodes.DUPLICATE_KEY, field=field, value=value)


class UploadError(AppError):
    """업로드 파일 저장 실패."""


# =============================================================================
# Error Codes
# =============================================================================

class ErrorCodes:
    """에러 코드 상수."""

    # === Auth ===
    AUTH_FAILED = "AUTH_FAILED"

    # === Store ===
    DUPLICATE_KEY = "DUPLICATE_KEY"
    STORE_WRITE_FAILED = "STORE_WRITE_FAILED"
    STORE_RECORD_CORRUPT = "STORE_RECORD_CORRUPT"
    STORE_LOCK_TIMEOUT = "STORE_LOCK_TIMEOUT"

    # === Upload ===
    UPLOAD_WRITE_FAILED = "UPLOAD_WRITE_FAILED"
