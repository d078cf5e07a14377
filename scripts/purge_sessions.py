#!/usr/bin/env python3
"""
purge_sessions.py - 만료 세션 레코드 정리 스크립트

<data_dir>/sessions/ 아래에서:
1. expires_at이 지난 세션 레코드 삭제
2. 읽을 수 없는(손상된) 세션 레코드 삭제

사용법:
    # 기본 실행 (dry-run)
    uv run python scripts/purge_sessions.py

    # 실제 삭제
    uv run python scripts/purge_sessions.py --execute

    # 다른 설정 파일 / 데이터 디렉터리
    uv run python scripts/purge_sessions.py --config prod.yaml --execute
    uv run python scripts/purge_sessions.py --data-dir /srv/coffee/data --execute

    # cron 예시 (매시 정각)
    0 * * * * cd /path/to/project && uv run python scripts/purge_sessions.py --execute >> /var/log/purge_sessions.log 2>&1
"""

import argparse
import logging
import sys
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from src.app.main import load_config, resolve_path  # noqa: E402
from src.app.services.sessions import SessionManager  # noqa: E402
from src.core.store import UserStore  # noqa: E402

# 로깅 설정
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


@dataclass
class PurgeResult:
    """Purge 결과."""
    scanned_sessions: int = 0
    purged_sessions: int = 0
    errors: list[str] = field(default_factory=list)


def purge_sessions(
    data_dir: Path,
    execute: bool,
    now: datetime | None = None,
    config: dict | None = None,
) -> PurgeResult:
    """만료/손상 세션 정리."""
    result = PurgeResult()

    sessions_dir = data_dir / "sessions"
    if not sessions_dir.exists():
        logger.warning(f"sessions 디렉터리 없음: {sessions_dir}")
        return result

    result.scanned_sessions = sum(1 for _ in sessions_dir.glob("*.json"))

    store = UserStore(data_dir, config)
    manager = SessionManager(data_dir, store)

    targets = manager.purge_expired(now=now, execute=execute)
    result.purged_sessions = len(targets)

    for path in targets:
        if execute and path.exists():
            result.errors.append(f"삭제 실패 {path}")
            logger.error(f"삭제 실패 {path}")
        elif execute:
            logger.info(f"삭제됨: {path.name}")
        else:
            logger.info(f"[DRY-RUN] 삭제 예정: {path.name}")

    return result


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="만료 세션 레코드 정리 스크립트",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--execute",
        action="store_true",
        help="실제 삭제 실행 (기본: dry-run)",
    )
    parser.add_argument(
        "--config",
        type=str,
        help="설정 파일 경로 (기본: COFFEE_CONFIG 또는 default.yaml)",
    )
    parser.add_argument(
        "--data-dir",
        type=str,
        help="데이터 디렉터리 (기본: 설정의 paths.data_dir)",
    )

    args = parser.parse_args(argv)

    config = load_config(Path(args.config) if args.config else None)
    data_dir = resolve_path(args.data_dir or config["paths"]["data_dir"])

    if not args.execute:
        logger.info("=" * 50)
        logger.info("DRY-RUN 모드 (실제 삭제 없음)")
        logger.info("실제 실행: --execute 옵션 추가")
        logger.info("=" * 50)

    result = purge_sessions(
        data_dir=data_dir,
        execute=args.execute,
        now=datetime.now(UTC),
        config=config,
    )

    logger.info("=" * 50)
    logger.info("Purge 결과:")
    logger.info(f"  스캔: {result.scanned_sessions} sessions")
    logger.info(f"  정리: {result.purged_sessions} sessions")
    if result.errors:
        logger.warning(f"  에러: {len(result.errors)}개")
        for err in result.errors[:5]:
            logger.warning(f"    - {err}")

    return 0 if not result.errors else 1


if __name__ == "__main__":
    sys.exit(main())
