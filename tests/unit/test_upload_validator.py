import pytest

from finingest.documents.exceptions import (
    EmptyFileError,
    FileTooLargeError,
    MissingFileError,
    UnsupportedFileTypeError,
    UploadValidationError,
)
from finingest.documents.types import FileKind
from finingest.documents.upload_validator import (
    DEFAULT_MAX_UPLOAD_BYTES,
    file_kind_for,
    validate_upload,
)


class TestAcceptedUploads:
    def test_accepts_csv(self) -> None:
        assert validate_upload("employees.csv", 2048) is FileKind.CSV

    def test_accepts_pdf(self) -> None:
        assert validate_upload("report.pdf", 2048) is FileKind.PDF

    def test_extension_is_case_insensitive(self) -> None:
        assert validate_upload("REPORT.PDF", 10) is FileKind.PDF

    def test_accepts_file_at_exact_limit(self) -> None:
        assert validate_upload("big.csv", DEFAULT_MAX_UPLOAD_BYTES) is FileKind.CSV


class TestRejectedUploads:
    def test_missing_filename(self) -> None:
        with pytest.raises(MissingFileError, match="No file provided"):
            validate_upload(None, 100)

    def test_missing_size(self) -> None:
        with pytest.raises(MissingFileError):
            validate_upload("a.csv", None)

    def test_unsupported_extension(self) -> None:
        with pytest.raises(UnsupportedFileTypeError, match="Only CSV and PDF"):
            validate_upload("sheet.xlsx", 100)

    def test_too_large(self) -> None:
        with pytest.raises(FileTooLargeError, match="Maximum size is 10MB"):
            validate_upload("a.pdf", DEFAULT_MAX_UPLOAD_BYTES + 1)

    def test_custom_limit_in_message(self) -> None:
        with pytest.raises(FileTooLargeError, match="Maximum size is 1MB"):
            validate_upload("a.pdf", 2 * 1024 * 1024, max_bytes=1024 * 1024)

    def test_empty_file(self) -> None:
        with pytest.raises(EmptyFileError, match="File is empty"):
            validate_upload("a.csv", 0)

    def test_type_checked_before_size(self) -> None:
        with pytest.raises(UnsupportedFileTypeError):
            validate_upload("a.docx", 0)

    def test_all_rejections_share_base_class(self) -> None:
        with pytest.raises(UploadValidationError):
            validate_upload("a.txt", 10)


class TestFileKindFor:
    def test_unknown_extension_is_none(self) -> None:
        assert file_kind_for("notes.txt") is None

    def test_no_extension_is_none(self) -> None:
        assert file_kind_for("README") is None
