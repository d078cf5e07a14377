"""
파일 저장소 기반: 저장소 락 + 원자적 JSON 쓰기

규칙:
- 락 관리: filelock.FileLock (프로세스/스레드 간 배타, 타임아웃)
- 원자적 쓰기: temp → rename + fsync
- 배타적 생성: O_CREAT | O_EXCL (unique 인덱스용)

fsync 실패는 경고만 남기고 계속 진행한다.
"""

import json
import logging
import os
import tempfile
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from filelock import FileLock, Timeout

from src.domain.errors import ErrorCodes, PersistenceError

logger = logging.getLogger(__name__)

DEFAULT_LOCK_FILENAME = "store.lock"
DEFAULT_LOCK_TIMEOUT = 5.0

# =============================================================================
# Lock Management
# =============================================================================


@contextmanager
def store_lock(root: Path, config: dict) -> Generator[Path, None, None]:
    """
    저장소 락 획득.

    같은 root에 대한 create/save를 직렬화한다.

    Args:
        root: 락 파일이 놓일 디렉터리 (없으면 생성)
        config: 설정 (paths.lock_file, store.lock_timeout)

    Yields:
        lock_path: 락 파일 경로

    Raises:
        PersistenceError: STORE_LOCK_TIMEOUT
    """
    lock_name = config.get("paths", {}).get("lock_file", DEFAULT_LOCK_FILENAME)
    timeout = float(config.get("store", {}).get("lock_timeout", DEFAULT_LOCK_TIMEOUT))

    root.mkdir(parents=True, exist_ok=True)
    lock_path = root / lock_name
    lock = FileLock(lock_path, timeout=timeout)

    try:
        lock.acquire()
    except Timeout as e:
        raise PersistenceError(
            ErrorCodes.STORE_LOCK_TIMEOUT,
            root=str(root),
            timeout=timeout,
        ) from e

    try:
        yield lock_path
    finally:
        lock.release()


# =============================================================================
# Atomic Write
# =============================================================================


def _fsync_dir(dir_path: Path) -> None:
    """디렉토리 fsync (rename 엔트리 내구성, 가능한 환경에서만)."""
    try:
        dir_fd = os.open(str(dir_path), os.O_RDONLY | os.O_DIRECTORY)
        try:
            os.fsync(dir_fd)
        finally:
            os.close(dir_fd)
    except (OSError, AttributeError) as e:
        logger.warning(f"Directory fsync failed for {dir_path}: {e}")


def atomic_write_json(path: Path, data: dict) -> None:
    """
    원자적 JSON 쓰기.

    - 중간 상태 없음: temp → rename
    - 파일 fsync + 디렉토리 fsync
    - 실패 시 temp 파일 삭제, 원본 유지
    """
    dir_path = path.parent
    dir_path.mkdir(parents=True, exist_ok=True)

    temp_path = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            dir=dir_path,
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        ) as f:
            temp_path = Path(f.name)
            json.dump(data, f, indent=2, ensure_ascii=False)
            f.flush()
            try:
                os.fsync(f.fileno())
            except OSError as e:
                logger.warning(f"File fsync failed for {path}: {e}")

        os.replace(temp_path, path)
        _fsync_dir(dir_path)

    except Exception:
        if temp_path and temp_path.exists():
            try:
                temp_path.unlink()
            except OSError:
                pass
        raise


def atomic_write_json_exclusive(path: Path, data: dict) -> bool:
    """
    파일이 없을 때만 JSON 생성 (TOCTOU-safe).

    O_EXCL로 "존재 확인 + 생성"을 한 번에 처리한다.

    Returns:
        True: 새로 생성됨
        False: 이미 존재 (덮어쓰지 않음)
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    try:
        fd = os.open(str(path), os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o644)
    except FileExistsError:
        return False

    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
            f.flush()
            try:
                os.fsync(f.fileno())
            except OSError as e:
                logger.warning(f"File fsync failed for {path}: {e}")
    except Exception:
        # 반쯤 쓰인 파일을 남기면 인덱스가 영구 점유됨
        try:
            path.unlink()
        except OSError:
            pass
        raise

    return True


def load_json(path: Path) -> dict[str, Any] | None:
    """
    JSON 파일 로드.

    Returns:
        데이터 dict 또는 None (파일 없음)

    Raises:
        PersistenceError: STORE_RECORD_CORRUPT (파싱 실패/읽기 실패/객체 아님)
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return None
    except (json.JSONDecodeError, OSError) as e:
        raise PersistenceError(
            ErrorCodes.STORE_RECORD_CORRUPT,
            path=str(path),
            error=str(e),
        ) from e

    if not isinstance(data, dict):
        raise PersistenceError(
            ErrorCodes.STORE_RECORD_CORRUPT,
            path=str(path),
            error=f"expected JSON object, got {type(data).__name__}",
        )
    return data
