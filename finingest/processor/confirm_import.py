from collections.abc import Mapping

from finingest.database.repositories.documents_repository import DocumentsRepository
from finingest.documents.models import ImportOutcome
from finingest.documents.row_importer import RowImporter
from finingest.documents.tabular_parser import parse_csv_bytes
from finingest.documents.types import TabularType
from finingest.logging.logger import Log
from finingest.processor.exceptions import DocumentNotFoundError
from finingest.processor.file_loader import FileLoader


class ConfirmImportService:
    """Imports a CSV document with the type and column mapping the user confirmed."""

    def __init__(
        self,
        doc_repo: DocumentsRepository,
        file_loader: FileLoader,
        importer: RowImporter,
    ) -> None:
        self._doc_repo = doc_repo
        self._file_loader = file_loader
        self._importer = importer

    def confirm(
        self,
        document_id: int,
        owner_id: str,
        mappings: Mapping[str, str],
        tabular_type: TabularType | None = None,
    ) -> ImportOutcome:
        """Re-read the whole file and import every row.

        ``tabular_type`` overrides the detected type stored on the document.

        Raises:
            DocumentNotFoundError: if the document does not exist or belongs
                to another owner.
            FileReadError: if the stored file cannot be read.
            TabularParseError: if the file no longer parses.
        """
        document = self._doc_repo.find_by_id(document_id)
        if document.user_id != owner_id:
            raise DocumentNotFoundError(f"Document {document_id} not found")

        final_type = tabular_type or self._stored_type(document.csv_type)
        parsed = parse_csv_bytes(self._file_loader.load(document))
        outcome = self._importer.import_rows(owner_id, final_type, mappings, parsed.rows)
        self._doc_repo.save_import_result(
            document_id,
            csv_type=final_type.value,
            column_mappings=dict(mappings),
            outcome=outcome,
        )
        Log.info(
            f"Confirmed import for document {document_id}",
            type=final_type.value,
            imported=outcome.rows_imported,
            skipped=outcome.rows_skipped,
        )
        return outcome

    @staticmethod
    def _stored_type(csv_type: str | None) -> TabularType:
        try:
            return TabularType(csv_type)
        except ValueError:
            return TabularType.UNKNOWN
