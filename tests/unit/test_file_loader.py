from pathlib import Path

import pytest

from finingest.processor.exceptions import FileReadError
from finingest.processor.file_loader import FileLoader
from finingest.processor.models import UploadedDocument


def _make_document(storage_path: str = "user-1/roster.csv") -> UploadedDocument:
    return UploadedDocument(
        id=1,
        user_id="user-1",
        filename="roster.csv",
        file_type="csv",
        file_size=12,
        storage_path=storage_path,
    )


class TestLoadReturnsBytes:
    def test_returns_bytes(self, tmp_path: Path) -> None:
        loader = FileLoader(files_root=tmp_path)
        (tmp_path / "user-1").mkdir()
        (tmp_path / "user-1" / "roster.csv").write_bytes(b"Name,Role\n")

        assert loader.load(_make_document()) == b"Name,Role\n"

    def test_leading_slash_stays_under_root(self, tmp_path: Path) -> None:
        loader = FileLoader(files_root=tmp_path)
        (tmp_path / "user-1").mkdir()
        (tmp_path / "user-1" / "roster.csv").write_bytes(b"x")

        assert loader.load(_make_document("/user-1/roster.csv")) == b"x"


class TestLoadRaises:
    def test_missing_file(self, tmp_path: Path) -> None:
        loader = FileLoader(files_root=tmp_path)

        with pytest.raises(FileReadError, match="File not found"):
            loader.load(_make_document("user-1/missing.csv"))

    def test_directory_is_not_a_file(self, tmp_path: Path) -> None:
        loader = FileLoader(files_root=tmp_path)
        (tmp_path / "user-1").mkdir()

        with pytest.raises(FileReadError, match="File not found"):
            loader.load(_make_document("user-1"))

    def test_path_traversal(self, tmp_path: Path) -> None:
        loader = FileLoader(files_root=tmp_path / "files")

        with pytest.raises(FileReadError, match="outside files root"):
            loader.load(_make_document("../secrets.txt"))


class TestDefaults:
    def test_default_root(self) -> None:
        path = FileLoader().resolve_path(_make_document())

        assert path == Path("/app/files/user-1/roster.csv").resolve()
