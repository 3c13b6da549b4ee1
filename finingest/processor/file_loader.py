from pathlib import Path

from finingest.processor.exceptions import FileReadError
from finingest.processor.models import UploadedDocument


class FileLoader:
    """Resolves a document's storage path under the files root and reads its bytes."""

    FILES_ROOT = Path("/app/files")

    def __init__(self, files_root: Path | None = None) -> None:
        self._files_root = files_root if files_root is not None else self.FILES_ROOT

    def load(self, document: UploadedDocument) -> bytes:
        """Read document bytes from disk.

        Raises:
            FileReadError: if the path escapes the files root, does not exist
                or cannot be read.
        """
        path = self.resolve_path(document)
        if not path.is_file():
            raise FileReadError(f"File not found: {document.storage_path}")
        try:
            return path.read_bytes()
        except OSError as exc:
            raise FileReadError(f"Failed to read {document.storage_path}: {exc}") from exc

    def resolve_path(self, document: UploadedDocument) -> Path:
        root = self._files_root.resolve()
        path = (root / document.storage_path.lstrip("/")).resolve()
        if not path.is_relative_to(root):
            raise FileReadError(f"Storage path outside files root: {document.storage_path}")
        return path
