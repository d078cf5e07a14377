"""
User Store: 사용자 레코드 영속화 (JSON 파일)

구조:
    <data_dir>/users/<user_id>.json
    <data_dir>/users/_usernames/<sha256(username)>.json  → {"username", "user_id"}

규칙:
- username unique: 인덱스 파일을 O_EXCL로 선점 (저장소 수준 제약)
- 레코드 쓰기는 원자적 (temp → rename)
- create/save는 저장소 락 안에서 실행 (username 변경 시 인덱스 교체)
- delete/list 없음
"""

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from src.core.atomic import (
    atomic_write_json,
    atomic_write_json_exclusive,
    load_json,
    store_lock,
)
from src.core.ids import generate_user_id, hash_key
from src.domain.constants import USERNAME_INDEX_DIR, USERS_DIR
from src.domain.errors import DuplicateKey, ErrorCodes, PersistenceError
from src.domain.schemas import User

logger = logging.getLogger(__name__)

# save() 로 바꿀 수 있는 필드 (id, created_at 제외)
EDITABLE_FIELDS = ("username", "password", "email", "avatar", "avatar_url")


class UserStore:
    """
    사용자 저장소.

    Usage:
        store = UserStore(data_dir, config)
        user = store.create(username="alice", password="pw")
        store.find_by_username("alice")
    """

    def __init__(self, data_dir: Path, config: dict | None = None):
        """
        Args:
            data_dir: 데이터 루트 (users/ 는 첫 쓰기 때 생성됨)
            config: 락 설정 (paths.lock_file, store.lock_timeout)
        """
        self.config = config or {}
        self.users_dir = data_dir / USERS_DIR
        self.index_dir = self.users_dir / USERNAME_INDEX_DIR

    # -------------------------------------------------------------------------
    # Paths
    # -------------------------------------------------------------------------

    def _record_path(self, user_id: str) -> Path:
        return self.users_dir / f"{user_id}.json"

    def _index_path(self, username: str) -> Path:
        return self.index_dir / f"{hash_key(username)}.json"

    @staticmethod
    def _is_valid_id(user_id: str) -> bool:
        # 경로 순회 방지: 파일명 한 조각만 허용
        return bool(user_id) and Path(user_id).name == user_id and not user_id.startswith(".")

    # -------------------------------------------------------------------------
    # Read
    # -------------------------------------------------------------------------

    def find_by_id(self, user_id: str) -> User | None:
        """
        ID로 사용자 조회.

        Raises:
            PersistenceError: 레코드 손상
        """
        if not self._is_valid_id(user_id):
            return None

        data = load_json(self._record_path(user_id))
        if data is None:
            return None
        return User.from_dict(data)

    def find_by_username(self, username: str) -> User | None:
        """
        username으로 사용자 조회.

        인덱스가 가리키는 레코드의 username이 다르면 (중단된 이름 변경) 없음 처리.
        """
        if not username:
            return None

        entry = load_json(self._index_path(username))
        if entry is None:
            return None

        user = self.find_by_id(str(entry.get("user_id", "")))
        if user is None or user.username != username:
            return None
        return user

    # -------------------------------------------------------------------------
    # Write
    # -------------------------------------------------------------------------

    def _claim_username(self, username: str, user_id: str) -> None:
        """
        username 인덱스 선점.

        이미 같은 user_id가 가진 인덱스면 그대로 통과.

        Raises:
            DuplicateKey: 다른 사용자가 사용 중
        """
        index_path = self._index_path(username)
        entry = {"username": username, "user_id": user_id}

        try:
            if atomic_write_json_exclusive(index_path, entry):
                return
        except OSError as e:
            raise PersistenceError(
                ErrorCodes.STORE_WRITE_FAILED, path=str(index_path), error=str(e)
            ) from e

        existing = load_json(index_path) or {}
        owner_id = str(existing.get("user_id", ""))
        if owner_id == user_id:
            return

        # 인덱스 주인이 사라졌거나 이미 다른 이름으로 바뀐 경우 → 회수
        owner = self.find_by_id(owner_id)
        if owner is None or owner.username != username:
            logger.warning(f"Reclaiming stale username index for user {owner_id!r}")
            self._write(index_path, entry)
            return

        raise DuplicateKey("username", username)

    def _release_username(self, username: str, user_id: str) -> None:
        """username 인덱스 해제 (해당 user_id 소유일 때만)."""
        index_path = self._index_path(username)
        entry = load_json(index_path)
        if entry is None or str(entry.get("user_id")) != user_id:
            return
        try:
            index_path.unlink()
        except OSError as e:
            logger.warning(f"Failed to release username index {index_path}: {e}")

    def _write(self, path: Path, data: dict[str, Any]) -> None:
        try:
            atomic_write_json(path, data)
        except OSError as e:
            raise PersistenceError(
                ErrorCodes.STORE_WRITE_FAILED, path=str(path), error=str(e)
            ) from e

    def create(
        self,
        username: str,
        password: str,
        email: str | None = None,
    ) -> User:
        """
        새 사용자 생성.

        Returns:
            저장된 User (id 발급됨)

        Raises:
            DuplicateKey: username 중복
            PersistenceError: 쓰기 실패
        """
        user = User(
            id=generate_user_id(),
            username=username,
            password=password,
            email=email,
        )

        with store_lock(self.users_dir, self.config):
            self._claim_username(username, user.id)
            try:
                self._write(self._record_path(user.id), user.to_dict())
            except PersistenceError:
                self._release_username(username, user.id)
                raise

        return user

    def save(self, user: User, fields: Iterable[str] | None = None) -> User:
        """
        사용자 레코드 저장 (변경 필드만 병합).

        락 안에서 저장된 레코드를 다시 읽고 fields에 든 값만 덮어쓴다.
        오래된 메모리 사본이 다른 요청의 변경을 되돌리지 않는다.
        username이 바뀌었으면 새 인덱스 선점 → 레코드 쓰기 → 이전 인덱스 해제.

        Args:
            user: 변경이 적용된 사용자
            fields: 변경된 필드 이름 (None이면 수정 가능한 필드 전체)

        Returns:
            병합 후 저장된 User (user 객체도 같은 값으로 갱신됨)

        Raises:
            DuplicateKey: 새 username이 다른 사용자 소유
            PersistenceError: 레코드 없음, 쓰기 실패
        """
        changed = list(EDITABLE_FIELDS if fields is None else fields)
        unknown = set(changed) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValueError(f"Not editable: {sorted(unknown)}")

        if not self._is_valid_id(user.id):
            raise PersistenceError(ErrorCodes.STORE_WRITE_FAILED, user_id=user.id)

        with store_lock(self.users_dir, self.config):
            stored = load_json(self._record_path(user.id))
            if stored is None:
                raise PersistenceError(
                    ErrorCodes.STORE_WRITE_FAILED,
                    user_id=user.id,
                    error="record not found",
                )

            merged = User.from_dict(stored)
            for name in changed:
                setattr(merged, name, getattr(user, name))

            # username이 fields에 없으면 merged.username == old_username
            old_username = str(stored.get("username", ""))
            renamed = merged.username != old_username

            if renamed:
                self._claim_username(merged.username, user.id)

            try:
                self._write(self._record_path(user.id), merged.to_dict())
            except PersistenceError:
                if renamed:
                    self._release_username(merged.username, user.id)
                raise

            if renamed:
                self._release_username(old_username, user.id)

        for name in EDITABLE_FIELDS:
            setattr(user, name, getattr(merged, name))
        return merged
