"""
Logging setup: 프로세스 전역 로깅 설정

- 포맷: "%(asctime)s [%(levelname)s] %(message)s"
- 레벨: config logging.level (기본 INFO)
- 비밀번호는 어떤 로그에도 남기지 않는다
"""

import logging
from typing import Any

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def resolve_level(config: dict[str, Any]) -> int:
    """
    설정에서 로그 레벨 추출.

    알 수 없는 이름이면 INFO.
    """
    name = str(config.get("logging", {}).get("level", "INFO")).upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def configure_logging(config: dict[str, Any]) -> int:
    """
    루트 로거 설정.

    이미 핸들러가 있으면 (uvicorn/pytest) 레벨만 맞춘다.

    Returns:
        적용된 레벨
    """
    level = resolve_level(config)
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
    )
    logging.getLogger("src").setLevel(level)
    return level


def describe_error(error: Exception) -> dict[str, Any]:
    """
    에러를 로그용 dict로 변환.

    AppError면 to_dict(), 아니면 타입/메시지.
    """
    to_dict = getattr(error, "to_dict", None)
    if callable(to_dict):
        data: dict[str, Any] = to_dict()
        return data
    return {"code": type(error).__name__, "message": str(error)}
