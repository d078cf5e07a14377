"""
Upload Handler: 아바타 파일 저장

규칙:
- 요청당 파일 1개 (필드명: avatar)
- 파일명: <소유자><원본 확장자>
  - 소유자 = 로그인 사용자 id, 없으면 epoch 밀리초
- 같은 이름 파일은 덮어씀
- 타입/크기 검증 없음 (어떤 파일이든 저장)
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from src.core.ids import timestamp_identifier
from src.domain.constants import UPLOADS_URL_PREFIX
from src.domain.errors import ErrorCodes, UploadError
from src.domain.schemas import User

logger = logging.getLogger(__name__)


@dataclass
class AvatarUpload:
    """폼에서 받은 업로드 파일."""
    filename: str
    content: bytes

    @property
    def extension(self) -> str:
        """
        원본 확장자 (점 포함, 없으면 빈 문자열).

        "photo." 처럼 점으로 끝나면 "." (숨김 파일 ".bashrc"는 확장자 없음).
        """
        name = Path(self.filename).name
        if name.endswith(".") and name.strip("."):
            return "."
        return Path(name).suffix


def ensure_uploads_dir(uploads_dir: Path) -> Path:
    """업로드 디렉터리 보장 (멱등)."""
    uploads_dir.mkdir(parents=True, exist_ok=True)
    return uploads_dir


class UploadHandler:
    """아바타 업로드 저장 서비스."""

    def __init__(self, uploads_dir: Path, url_prefix: str = UPLOADS_URL_PREFIX):
        """
        Args:
            uploads_dir: 공개 업로드 디렉터리 (/uploads/ 로 서빙됨)
            url_prefix: 클라이언트가 접근할 경로 prefix
        """
        self.uploads_dir = uploads_dir
        self.url_prefix = url_prefix.rstrip("/")

    def target_name(self, upload: AvatarUpload, current_user: User | None) -> str:
        """저장 파일명 결정."""
        if current_user is not None and current_user.id:
            owner = current_user.id
        else:
            # 인증 게이트 뒤에서는 도달하지 않지만 게이트 없는 재사용 대비 유지
            owner = timestamp_identifier()
        return f"{owner}{upload.extension}"

    def handle(self, upload: AvatarUpload, current_user: User | None) -> str:
        """
        업로드 파일 저장.

        Returns:
            공개 경로 (예: /uploads/<id>.png)

        Raises:
            UploadError: UPLOAD_WRITE_FAILED
        """
        filename = self.target_name(upload, current_user)
        target = self.uploads_dir / filename

        try:
            ensure_uploads_dir(self.uploads_dir)
            target.write_bytes(upload.content)
        except OSError as e:
            raise UploadError(
                ErrorCodes.UPLOAD_WRITE_FAILED,
                filename=filename,
                error=str(e),
            ) from e

        logger.info(f"Stored upload {filename} ({len(upload.content)} bytes)")
        return f"{self.url_prefix}/{filename}"
