"""
Core layer: 영속화/ID/로깅 핵심 모듈.

역할:
- 사용자 저장소 (JSON 파일, unique 인덱스)
- 원자적 쓰기, 디렉터리 락
- ID/토큰 생성
"""

from .atomic import atomic_write_json, atomic_write_json_exclusive, load_json, store_lock
from .ids import generate_session_token, generate_user_id, hash_key, timestamp_identifier
from .logging import configure_logging, describe_error
from .store import UserStore

__all__ = [
    # atomic
    "store_lock",
    "atomic_write_json",
    "atomic_write_json_exclusive",
    "load_json",
    # ids
    "generate_user_id",
    "generate_session_token",
    "hash_key",
    "timestamp_identifier",
    # logging
    "configure_logging",
    "describe_error",
    # store
    "UserStore",
]
