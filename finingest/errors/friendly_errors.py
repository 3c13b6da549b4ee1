"""Turns technical failure messages into short, user-facing explanations."""

from dataclasses import dataclass
from enum import Enum


class ErrorContext(str, Enum):
    DOCUMENT_UPLOAD = "document_upload"
    DOCUMENT_PROCESSING = "document_processing"
    CSV_IMPORT = "csv_import"
    API_REQUEST = "api_request"
    AUTH = "auth"
    DATA_ENTRY = "data_entry"
    GENERAL = "general"


@dataclass(frozen=True)
class FriendlyError:
    message: str
    suggestion: str | None
    is_retryable: bool

    def as_text(self) -> str:
        """Message and suggestion as one line, as stored on a failed document."""
        if not self.suggestion:
            return self.message
        return f"{self.message} {self.suggestion}"


@dataclass(frozen=True)
class _ErrorPattern:
    keywords: tuple[str, ...]
    error: FriendlyError
    # None matches every context
    contexts: frozenset[ErrorContext] | None = None

    def matches(self, lower_message: str, context: ErrorContext) -> bool:
        if self.contexts is not None and context not in self.contexts:
            return False
        return any(keyword in lower_message for keyword in self.keywords)


# Checked in order; the first match wins.
_PATTERNS: tuple[_ErrorPattern, ...] = (
    _ErrorPattern(
        ("network", "connection", "fetch failed", "offline", "econnrefused"),
        FriendlyError(
            "We couldn't connect to our servers.",
            "Check your internet connection and try again.",
            True,
        ),
    ),
    _ErrorPattern(
        ("timeout", "timed out", "too long", "exceeded", "etimedout"),
        FriendlyError(
            "This document is taking longer than expected to process.",
            "Try uploading a simpler file, or export your data as CSV for faster processing.",
            True,
        ),
        frozenset({ErrorContext.DOCUMENT_PROCESSING}),
    ),
    _ErrorPattern(
        ("rate limit", "429", "too many requests"),
        FriendlyError(
            "We're getting a lot of requests right now.",
            "Please wait a moment and try again.",
            True,
        ),
    ),
    _ErrorPattern(
        ("unauthorized", "401", "session expired", "not authenticated"),
        FriendlyError(
            "Your session has expired.",
            "Please refresh the page to sign in again.",
            False,
        ),
    ),
    _ErrorPattern(
        ("forbidden", "403", "permission denied", "access denied"),
        FriendlyError(
            "You don't have permission to do that.",
            "Contact your administrator if you need access.",
            False,
        ),
    ),
    _ErrorPattern(
        ("not found", "404", "does not exist"),
        FriendlyError(
            "We couldn't find what you're looking for.",
            "It may have been moved or deleted.",
            False,
        ),
    ),
    _ErrorPattern(
        ("unsupported", "invalid file", "corrupt", "cannot read", "format"),
        FriendlyError(
            "We couldn't read this file.",
            "Try exporting it as PDF or CSV from your accounting software.",
            False,
        ),
        frozenset({ErrorContext.DOCUMENT_UPLOAD, ErrorContext.DOCUMENT_PROCESSING}),
    ),
    _ErrorPattern(
        ("too large", "file size", "exceeds limit"),
        FriendlyError(
            "This file is too large to upload.",
            "Try splitting it into smaller files or compressing it.",
            False,
        ),
    ),
    _ErrorPattern(
        ("extract", "parse", "no data", "empty", "unrecognized"),
        FriendlyError(
            "We couldn't find any data to import from this file.",
            "Make sure the file contains the data you expect, or try entering it manually.",
            False,
        ),
        frozenset({ErrorContext.DOCUMENT_PROCESSING, ErrorContext.CSV_IMPORT}),
    ),
    _ErrorPattern(
        ("required", "missing", "invalid", "must be"),
        FriendlyError(
            "Some information is missing or incorrect.",
            "Please check the highlighted fields and try again.",
            True,
        ),
        frozenset({ErrorContext.DATA_ENTRY, ErrorContext.CSV_IMPORT}),
    ),
    _ErrorPattern(
        ("duplicate", "already exists", "unique constraint"),
        FriendlyError(
            "This item already exists.",
            "Try updating the existing one instead.",
            False,
        ),
    ),
    _ErrorPattern(
        ("500", "internal server error", "server error"),
        FriendlyError(
            "Something went wrong on our end.",
            "We're looking into it. Please try again in a moment.",
            True,
        ),
    ),
)

_FALLBACKS: dict[ErrorContext, FriendlyError] = {
    ErrorContext.DOCUMENT_UPLOAD: FriendlyError(
        "We had trouble uploading this file.",
        "Please try again, or try a different file.",
        True,
    ),
    ErrorContext.DOCUMENT_PROCESSING: FriendlyError(
        "We had trouble processing this document.",
        "Try uploading a CSV file for more reliable processing.",
        True,
    ),
    ErrorContext.CSV_IMPORT: FriendlyError(
        "We had trouble importing this data.",
        "Check that your CSV has the expected columns and try again.",
        True,
    ),
    ErrorContext.API_REQUEST: FriendlyError(
        "Something went wrong with your request.",
        "Please try again.",
        True,
    ),
    ErrorContext.AUTH: FriendlyError(
        "There was a problem with your account.",
        "Try signing in again.",
        False,
    ),
    ErrorContext.DATA_ENTRY: FriendlyError(
        "We couldn't save your changes.",
        "Please check the form and try again.",
        True,
    ),
    ErrorContext.GENERAL: FriendlyError(
        "Something went wrong.",
        "Please try again.",
        True,
    ),
}


def get_friendly_error(
    error: BaseException | str | None, context: ErrorContext = ErrorContext.GENERAL
) -> FriendlyError:
    """Map an exception or message to the first matching friendly error.

    Patterns may be limited to certain contexts; when none matches, the
    context's own fallback is returned.
    """
    lower_message = str(error or "").lower()
    for pattern in _PATTERNS:
        if pattern.matches(lower_message, context):
            return pattern.error
    return _FALLBACKS[context]
