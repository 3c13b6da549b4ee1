from dataclasses import dataclass


@dataclass(frozen=True)
class UploadedDocument:
    """Domain model for an uploaded document (subset of DB columns)."""

    id: int
    user_id: str
    filename: str
    file_type: str
    file_size: int
    storage_path: str
    csv_type: str | None = None
