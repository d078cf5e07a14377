"""
test_uploads.py - UploadHandler 테스트

- 파일명: <user.id><ext>, 로그인 사용자 없으면 epoch 밀리초
- 같은 이름 덮어쓰기
- 쓰기 실패 → UploadError(UPLOAD_WRITE_FAILED)
"""

from pathlib import Path

import pytest

from src.app.services.uploads import AvatarUpload, UploadHandler, ensure_uploads_dir
from src.domain.errors import ErrorCodes, UploadError
from src.domain.schemas import User


@pytest.fixture
def handler(uploads_dir: Path) -> UploadHandler:
    return UploadHandler(uploads_dir, "/uploads")


@pytest.fixture
def user() -> User:
    return User(id="abc123", username="alice", password="pw")


class TestAvatarUpload:
    """확장자 추출 테스트."""

    @pytest.mark.parametrize(
        "filename,expected",
        [
            ("cat.png", ".png"),
            ("holiday photo.JPG", ".JPG"),
            ("archive.tar.gz", ".gz"),
            ("noext", ""),
            ("photo.", "."),
            ("photo..", "."),
            (".bashrc", ""),
            ("..", ""),
        ],
    )
    def test_extension(self, filename: str, expected: str):
        assert AvatarUpload(filename=filename, content=b"").extension == expected


class TestUploadHandler:
    """업로드 저장 테스트."""

    def test_named_after_user_id(self, handler: UploadHandler, user: User, uploads_dir: Path):
        url = handler.handle(AvatarUpload("me.png", b"\x89PNG"), user)

        assert url == "/uploads/abc123.png"
        assert (uploads_dir / "abc123.png").read_bytes() == b"\x89PNG"

    def test_same_name_overwritten(self, handler: UploadHandler, user: User, uploads_dir: Path):
        handler.handle(AvatarUpload("a.png", b"first"), user)
        handler.handle(AvatarUpload("b.png", b"second"), user)

        assert (uploads_dir / "abc123.png").read_bytes() == b"second"
        assert len(list(uploads_dir.iterdir())) == 1

    def test_anonymous_uses_timestamp(self, handler: UploadHandler, monkeypatch):
        monkeypatch.setattr(
            "src.app.services.uploads.timestamp_identifier", lambda: "1700000000000"
        )

        url = handler.handle(AvatarUpload("x.gif", b"GIF"), None)

        assert url == "/uploads/1700000000000.gif"

    def test_prefix_trailing_slash_normalized(self, uploads_dir: Path, user: User):
        handler = UploadHandler(uploads_dir, "/uploads/")

        assert handler.handle(AvatarUpload("a.txt", b"x"), user) == "/uploads/abc123.txt"

    def test_creates_missing_dir(self, tmp_path: Path, user: User):
        target = tmp_path / "nested" / "uploads"
        handler = UploadHandler(target)

        handler.handle(AvatarUpload("a.png", b"x"), user)

        assert (target / "abc123.png").exists()

    def test_write_failure(self, tmp_path: Path, user: User):
        """업로드 경로가 파일이면 쓰기 실패."""
        blocker = tmp_path / "uploads"
        blocker.write_text("not a dir", encoding="utf-8")
        handler = UploadHandler(blocker)

        with pytest.raises(UploadError) as exc_info:
            handler.handle(AvatarUpload("a.png", b"x"), user)

        assert exc_info.value.code == ErrorCodes.UPLOAD_WRITE_FAILED


def test_ensure_uploads_dir_idempotent(uploads_dir: Path):
    ensure_uploads_dir(uploads_dir)
    ensure_uploads_dir(uploads_dir)

    assert uploads_dir.is_dir()


def test_trailing_dot_kept_in_name(handler: UploadHandler, user: User, uploads_dir: Path):
    """점으로 끝나는 파일명 → <id>."""
    url = handler.handle(AvatarUpload("photo.", b"x"), user)

    assert url == "/uploads/abc123."
    assert (uploads_dir / "abc123.").exists()
