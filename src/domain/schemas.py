"""
Data schemas for the web app.

규칙:
- User만 영속 엔티티 (삭제 경로 없음)
- password는 평문 그대로 저장/비교 (해시 도입 금지)
- Session은 user_id만 보관 (User를 소유하지 않음)
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

# =============================================================================
# User
# =============================================================================

@dataclass
class User:
    """
    사용자 레코드.

    avatar: /settings 업로드로 설정
    avatar_url: /profile/update 업로드로 설정
    """
    id: str
    username: str
    password: str
    email: str | None = None
    avatar: str | None = None
    avatar_url: str | None = None
    created_at: str = field(default_factory=lambda: datetime.now(UTC).isoformat())

    def to_dict(self) -> dict[str, Any]:
        """JSON 직렬화용."""
        return {
            "id": self.id,
            "username": self.username,
            "password": self.password,
            "email": self.email,
            "avatar": self.avatar,
            "avatar_url": self.avatar_url,
            "created_at": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "User":
        return cls(
            id=data["id"],
            username=data["username"],
            password=data.get("password", ""),
            email=data.get("email"),
            avatar=data.get("avatar"),
            avatar_url=data.get("avatar_url"),
            created_at=data.get("created_at", ""),
        )


# =============================================================================
# Session
# =============================================================================

@dataclass
class SessionRecord:
    """서버 측 세션 레코드 (token → user_id)."""
    user_id: str
    created_at: str
    expires_at: str

    def is_expired(self, now: datetime | None = None) -> bool:
        """만료 여부. 읽을 수 없거나 시간대 없는 expires_at은 만료로 본다."""
        now = now or datetime.now(UTC)
        try:
            expires_at = datetime.fromisoformat(self.expires_at)
            if expires_at.tzinfo is None:
                return True
            return expires_at <= now
        except (ValueError, TypeError):
            return True

    def to_dict(self) -> dict[str, Any]:
        return {
            "user_id": self.user_id,
            "created_at": self.created_at,
            "expires_at": self.expires_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SessionRecord":
        if not isinstance(data, dict):
            raise TypeError(f"Session record must be an object, got {type(data).__name__}")
        return cls(
            user_id=str(data["user_id"]),
            created_at=data.get("created_at", ""),
            expires_at=data.get("expires_at", ""),
        )
