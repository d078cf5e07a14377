"""
Credential Verifier: username/password 확인

규칙:
- password는 평문 동등 비교 (해시 도입 금지, 기존 평문 레코드 호환)
- 읽기 전용 (부수효과 없음)
"""

from src.core.store import UserStore
from src.domain.errors import AuthFailure
from src.domain.schemas import User


class CredentialVerifier:
    """로그인 자격 증명 확인 서비스."""

    def __init__(self, store: UserStore):
        self.store = store

    def verify(self, username: str | None, password: str | None) -> User:
        """
        자격 증명 확인.

        Args:
            username: 입력 username
            password: 입력 password

        Returns:
            일치하는 User

        Raises:
            AuthFailure: "missing credentials" | "unknown user" | "bad credentials"
            PersistenceError: 저장소 읽기 실패
        """
        if not username or not password:
            raise AuthFailure("missing credentials")

        user = self.store.find_by_username(username)
        if user is None:
            raise AuthFailure("unknown user", username=username)

        if user.password != password:
            raise AuthFailure("bad credentials", username=username)

        return user
