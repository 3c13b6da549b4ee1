import json
from pathlib import Path
from typing import Any

from finingest.documents.types import ExtractionSchema
from finingest.extraction.exceptions import ExtractionError

_DEFAULT_PROMPT_DIR = Path(__file__).parent / "prompts"
_DEFAULT_SCHEMA_DIR = Path(__file__).parent / "schemas"

_TABULAR_LAYOUT_HINT = (
    "- The text appears to contain tables; columns may be separated by runs of "
    "spaces or tabs\n"
)


def load_prompt_template(name: str, directory: Path | None = None) -> str:
    """Load a bundled prompt template by file stem.

    Raises:
        ExtractionError: if the file cannot be read.
    """
    path = (directory or _DEFAULT_PROMPT_DIR) / f"{name}.txt"
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ExtractionError(f"Failed to load prompt template '{name}': {exc}") from exc


def load_json_schema(schema: ExtractionSchema, directory: Path | None = None) -> dict[str, Any]:
    """Load the bundled JSON field contract for ``schema``.

    Raises:
        ExtractionError: if the file cannot be read or is not a JSON object.
    """
    path = (directory or _DEFAULT_SCHEMA_DIR) / f"{schema.value}.json"
    try:
        parsed = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ExtractionError(f"Failed to load JSON schema '{schema.value}': {exc}") from exc
    if not isinstance(parsed, dict):
        raise ExtractionError(f"JSON schema '{schema.value}' must be an object")
    return parsed


class PromptLibrary:
    """Prompt templates and JSON schemas for every extraction schema, loaded once."""

    def __init__(self, prompt_dir: Path | None = None, schema_dir: Path | None = None) -> None:
        self._vision_template = load_prompt_template("vision_prompt", prompt_dir)
        self._text_template = load_prompt_template("text_prompt", prompt_dir)
        self._focus = {
            schema: load_prompt_template(f"focus_{schema.value}", prompt_dir).strip()
            for schema in ExtractionSchema
        }
        self._schemas = {schema: load_json_schema(schema, schema_dir) for schema in ExtractionSchema}

    def vision_instruction(self, schema: ExtractionSchema) -> str:
        return self._vision_template.format(focus=self._focus[schema])

    def text_instruction(
        self, schema: ExtractionSchema, extracted_text: str, *, tabular: bool = False
    ) -> str:
        return self._text_template.format(
            focus=self._focus[schema],
            extracted_text=extracted_text,
            layout_hint=_TABULAR_LAYOUT_HINT if tabular else "",
        )

    def json_schema(self, schema: ExtractionSchema) -> dict[str, Any]:
        return self._schemas[schema]

    @staticmethod
    def schema_name(schema: ExtractionSchema) -> str:
        return f"{schema.value}_extraction"
