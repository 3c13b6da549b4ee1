from pathlib import PurePosixPath

from finingest.documents.exceptions import (
    EmptyFileError,
    FileTooLargeError,
    MissingFileError,
    UnsupportedFileTypeError,
)
from finingest.documents.types import FileKind

DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024

_EXTENSIONS: dict[str, FileKind] = {
    ".csv": FileKind.CSV,
    ".pdf": FileKind.PDF,
}


def file_kind_for(filename: str) -> FileKind | None:
    """Return the file kind implied by the extension, or None if unsupported."""
    suffix = PurePosixPath(filename.strip()).suffix.lower()
    return _EXTENSIONS.get(suffix)


def validate_upload(
    filename: str | None,
    size_bytes: int | None,
    max_bytes: int = DEFAULT_MAX_UPLOAD_BYTES,
) -> FileKind:
    """Check an upload against the accepted extensions and size limit.

    Returns:
        The FileKind of the accepted upload.

    Raises:
        MissingFileError: no filename was given.
        UnsupportedFileTypeError: the extension is not .csv or .pdf.
        FileTooLargeError: the file is larger than ``max_bytes``.
        EmptyFileError: the file is empty.
    """
    if not filename or size_bytes is None:
        raise MissingFileError("No file provided")

    kind = file_kind_for(filename)
    if kind is None:
        raise UnsupportedFileTypeError("Only CSV and PDF files are supported")

    if size_bytes > max_bytes:
        max_mb = max_bytes / (1024 * 1024)
        raise FileTooLargeError(f"File too large. Maximum size is {max_mb:g}MB.")

    if size_bytes <= 0:
        raise EmptyFileError("File is empty. Please upload a file with data.")

    return kind
