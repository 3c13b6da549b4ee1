class DocumentError(Exception):
    """Base exception for document ingestion errors."""


class UploadValidationError(DocumentError):
    """Raised when an upload is rejected before any pipeline stage runs."""


class MissingFileError(UploadValidationError):
    """Raised when no file was provided."""


class UnsupportedFileTypeError(UploadValidationError):
    """Raised when the file extension is not an accepted type."""


class FileTooLargeError(UploadValidationError):
    """Raised when the file exceeds the maximum upload size."""


class EmptyFileError(UploadValidationError):
    """Raised when the file has no content."""


class TabularParseError(DocumentError):
    """Raised when a CSV file cannot be parsed."""


class StoreWriteError(DocumentError):
    """Raised by a record store when a single write fails."""
