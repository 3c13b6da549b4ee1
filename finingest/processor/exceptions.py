class ProcessorError(Exception):
    """Base exception for all processor-related errors."""


class DocumentNotFoundError(ProcessorError):
    """Raised when a document cannot be found in the database."""


class FileReadError(ProcessorError):
    """Raised when a stored file cannot be read."""
