"""
Session Manager: 세션 쿠키 토큰 ↔ 사용자

구조:
    <data_dir>/sessions/<sha256(token)>.json → {"user_id", "created_at", "expires_at"}

규칙:
- 세션은 user_id만 보관, resolve 때마다 UserStore에서 다시 읽음
  (프로필 수정이 다음 요청에 바로 반영)
- 만료/없는 세션/사라진 사용자 → None
- end()는 멱등
"""

import logging
from datetime import UTC, datetime, timedelta
from pathlib import Path

from src.core.atomic import atomic_write_json, load_json
from src.core.ids import generate_session_token, hash_key
from src.core.store import UserStore
from src.domain.constants import SESSIONS_DIR
from src.domain.errors import ErrorCodes, PersistenceError
from src.domain.schemas import SessionRecord, User

logger = logging.getLogger(__name__)

DEFAULT_SESSION_TTL_SECONDS = 60 * 60 * 24


class SessionManager:
    """
    서버 측 세션 관리 서비스.

    토큰 원문은 쿠키에만 존재하고 디스크에는 해시만 남는다.
    """

    def __init__(
        self,
        data_dir: Path,
        store: UserStore,
        ttl_seconds: int = DEFAULT_SESSION_TTL_SECONDS,
    ):
        """
        Args:
            data_dir: 데이터 루트 (sessions/ 가 아래에 생성됨)
            store: 사용자 저장소 (resolve 시 재조회)
            ttl_seconds: 세션 유효 시간
        """
        self.store = store
        self.ttl_seconds = ttl_seconds
        self.sessions_dir = data_dir / SESSIONS_DIR
        self.sessions_dir.mkdir(parents=True, exist_ok=True)

    def _session_path(self, token: str) -> Path:
        return self.sessions_dir / f"{hash_key(token)}.json"

    def start(self, user: User) -> str:
        """
        세션 시작.

        Returns:
            쿠키로 내려줄 토큰

        Raises:
            PersistenceError: 세션 기록 실패
        """
        token = generate_session_token()
        now = datetime.now(UTC)
        record = SessionRecord(
            user_id=user.id,
            created_at=now.isoformat(),
            expires_at=(now + timedelta(seconds=self.ttl_seconds)).isoformat(),
        )

        path = self._session_path(token)
        try:
            atomic_write_json(path, record.to_dict())
        except OSError as e:
            raise PersistenceError(
                ErrorCodes.STORE_WRITE_FAILED, path=str(path), error=str(e)
            ) from e

        return token

    def resolve(self, token: str | None) -> User | None:
        """
        토큰 → 현재 사용자.

        손상된 세션 레코드는 없는 세션으로 취급하고 지운다.
        """
        if not token:
            return None

        path = self._session_path(token)
        try:
            data = load_json(path)
            record = SessionRecord.from_dict(data) if data is not None else None
        except (PersistenceError, KeyError, TypeError) as e:
            logger.warning(f"Discarding unreadable session record {path.name}: {e}")
            self._remove(path)
            return None

        if record is None:
            return None

        if record.is_expired():
            self._remove(path)
            return None

        return self.store.find_by_id(record.user_id)

    def end(self, token: str | None) -> None:
        """세션 종료 (없어도 무시)."""
        if not token:
            return
        self._remove(self._session_path(token))

    def purge_expired(self, now: datetime | None = None, execute: bool = True) -> list[Path]:
        """
        만료/손상 세션 레코드 정리.

        Args:
            now: 기준 시각 (기본: 현재)
            execute: False면 대상만 반환 (dry-run)

        Returns:
            정리 대상 경로 목록
        """
        now = now or datetime.now(UTC)
        targets: list[Path] = []

        for path in sorted(self.sessions_dir.glob("*.json")):
            try:
                data = load_json(path)
                if data is None:
                    continue
                expired = SessionRecord.from_dict(data).is_expired(now)
            except (PersistenceError, KeyError, TypeError):
                expired = True

            if expired:
                targets.append(path)

        if execute:
            for path in targets:
                self._remove(path)

        return targets

    @staticmethod
    def _remove(path: Path) -> None:
        try:
            path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Failed to remove session record {path}: {e}")
