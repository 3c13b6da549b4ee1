"""Tiered PDF extraction: text-first, image-first, then a single fallback hop."""

import dataclasses
import json
import time
from typing import Any

from finingest.documents.document_classifier import classify_filename
from finingest.documents.types import ExtractionSchema
from finingest.extraction.client_base import BaseExtractionClient
from finingest.extraction.exceptions import ExtractionError, ExtractionTimeoutError
from finingest.extraction.models import (
    Exhausted,
    ExtractionMethod,
    ExtractionOutcome,
    ExtractionResult,
    Ok,
    SchemaFailed,
    TimedOut,
)
from finingest.extraction.prompt_loader import PromptLibrary
from finingest.extraction.validator import validate_payload
from finingest.logging.logger import Log
from finingest.pdf.base import BasePdfExtractor
from finingest.pdf.exceptions import PdfExtractionError
from finingest.pdf.models import PdfText
from finingest.pdf.text_analysis import looks_tabular

_DEFAULT_FILENAME = "document.pdf"


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)


class ExtractionEngine:
    """Extracts schema-shaped financial data from PDF bytes via the oracle.

    Small files with enough embedded text go to the text model. Larger files,
    or files whose local text is missing or too short, go to the vision model
    under a hard timeout. A vision timeout falls back to the text strategy.
    Any other oracle failure retries once with the generic schema unless the
    schema was forced.
    """

    def __init__(
        self,
        *,
        client: BaseExtractionClient,
        pdf_extractor: BasePdfExtractor,
        vision_model: str,
        text_model: str,
        vision_timeout_seconds: float = 90.0,
        text_first_max_bytes: int = 100 * 1024,
        min_text_chars: int = 100,
        prompts: PromptLibrary | None = None,
    ) -> None:
        self._client = client
        self._pdf_extractor = pdf_extractor
        self._vision_model = vision_model
        self._text_model = text_model
        self._vision_timeout_seconds = vision_timeout_seconds
        self._text_first_max_bytes = text_first_max_bytes
        self._min_text_chars = min_text_chars
        self._prompts = prompts or PromptLibrary()

    @staticmethod
    def select_schema(
        filename: str | None = None, force_schema: ExtractionSchema | None = None
    ) -> ExtractionSchema:
        if force_schema is not None:
            return force_schema
        if filename:
            return classify_filename(filename)
        return ExtractionSchema.GENERIC

    def extract(
        self,
        file_bytes: bytes,
        filename: str | None = None,
        force_schema: ExtractionSchema | None = None,
    ) -> ExtractionOutcome:
        started = time.monotonic()
        schema = self.select_schema(filename, force_schema)
        forced = force_schema is not None
        Log.info("Extraction started", schema=schema.value, forced=forced, bytes=len(file_bytes))

        unusable_text: SchemaFailed | None = None
        if len(file_bytes) < self._text_first_max_bytes:
            pdf_text = self._read_text(file_bytes, schema)
            if isinstance(pdf_text, PdfText):
                outcome = self._text_first(pdf_text, schema, forced=forced)
                return self._finish(outcome, started)
            unusable_text = pdf_text
            Log.info("Text-first extraction fell through to vision", reason=unusable_text.cause)

        outcome = self._image_first(
            file_bytes,
            filename or _DEFAULT_FILENAME,
            schema,
            forced=forced,
            unusable_text=unusable_text,
        )
        return self._finish(outcome, started)

    def _text_first(
        self, pdf_text: PdfText, schema: ExtractionSchema, *, forced: bool
    ) -> ExtractionOutcome:
        # usable local text: an oracle failure here is the primary failure
        primary = self._attempt_text(pdf_text, schema)
        if isinstance(primary, Ok) or forced or schema is ExtractionSchema.GENERIC:
            return primary

        Log.info("Retrying text extraction with generic schema", reason=primary.cause)
        retry = self._attempt_text(pdf_text, ExtractionSchema.GENERIC)
        if isinstance(retry, Ok):
            return retry
        return Exhausted(causes=(primary.cause, f"generic fallback failed: {retry.cause}"))

    def _image_first(
        self,
        file_bytes: bytes,
        filename: str,
        schema: ExtractionSchema,
        *,
        forced: bool,
        unusable_text: SchemaFailed | None,
    ) -> ExtractionOutcome:
        primary = self._attempt_vision(file_bytes, filename, schema)
        if isinstance(primary, Ok):
            return primary

        if isinstance(primary, TimedOut):
            Log.warning(
                "Vision extraction timed out, falling back to text",
                timeout_seconds=primary.timeout_seconds,
            )
            fallback = unusable_text or self._text_fallback(file_bytes, schema)
            if isinstance(fallback, Ok):
                return fallback
            return Exhausted(
                causes=(primary.cause, f"text extraction fallback failed: {fallback.reason}")
            )

        if forced or schema is ExtractionSchema.GENERIC:
            return primary

        Log.info("Retrying extraction with generic schema", reason=primary.cause)
        retry = self._attempt_vision(file_bytes, filename, ExtractionSchema.GENERIC)
        if isinstance(retry, Ok):
            return retry
        return Exhausted(causes=(primary.cause, f"generic fallback failed: {retry.cause}"))

    def _text_fallback(self, file_bytes: bytes, schema: ExtractionSchema) -> Ok | SchemaFailed:
        pdf_text = self._read_text(file_bytes, schema)
        if isinstance(pdf_text, SchemaFailed):
            return pdf_text
        return self._attempt_text(pdf_text, schema)

    def _read_text(self, file_bytes: bytes, schema: ExtractionSchema) -> PdfText | SchemaFailed:
        """Local text extraction; a SchemaFailed means there is no usable text."""
        started = time.monotonic()
        try:
            pdf_text = self._pdf_extractor.extract(file_bytes)
        except PdfExtractionError as exc:
            return SchemaFailed(schema, ExtractionMethod.TEXT, str(exc), _elapsed_ms(started))

        if pdf_text.char_count < self._min_text_chars:
            return SchemaFailed(
                schema,
                ExtractionMethod.TEXT,
                f"insufficient text ({pdf_text.char_count} chars, need {self._min_text_chars})",
                _elapsed_ms(started),
            )
        return pdf_text

    def _attempt_text(self, pdf_text: PdfText, schema: ExtractionSchema) -> Ok | SchemaFailed:
        started = time.monotonic()
        instruction = self._prompts.text_instruction(
            schema, pdf_text.text, tabular=looks_tabular(pdf_text.text)
        )
        Log.debug(f"Text extraction prompt:\n{instruction}")
        try:
            raw = self._client.complete_with_text(
                model=self._text_model,
                instruction=instruction,
                json_schema=self._prompts.json_schema(schema),
                schema_name=self._prompts.schema_name(schema),
            )
            data = self._parse_and_validate(schema, raw)
        except ExtractionError as exc:
            return SchemaFailed(schema, ExtractionMethod.TEXT, str(exc), _elapsed_ms(started))

        elapsed = _elapsed_ms(started)
        Log.info(
            "Text extraction complete",
            schema=schema.value,
            pages=pdf_text.page_count,
            chars=pdf_text.char_count,
            elapsed_ms=elapsed,
        )
        return Ok(ExtractionResult(schema, data, elapsed, ExtractionMethod.TEXT), elapsed)

    def _attempt_vision(
        self, file_bytes: bytes, filename: str, schema: ExtractionSchema
    ) -> Ok | TimedOut | SchemaFailed:
        started = time.monotonic()
        instruction = self._prompts.vision_instruction(schema)
        Log.debug(f"Vision extraction prompt:\n{instruction}")
        try:
            raw = self._client.complete_with_document(
                model=self._vision_model,
                instruction=instruction,
                document=file_bytes,
                filename=filename,
                json_schema=self._prompts.json_schema(schema),
                schema_name=self._prompts.schema_name(schema),
                timeout_seconds=self._vision_timeout_seconds,
            )
            data = self._parse_and_validate(schema, raw)
        except ExtractionTimeoutError:
            return TimedOut(schema, self._vision_timeout_seconds, _elapsed_ms(started))
        except ExtractionError as exc:
            return SchemaFailed(schema, ExtractionMethod.VISION, str(exc), _elapsed_ms(started))

        elapsed = _elapsed_ms(started)
        Log.info("Vision extraction complete", schema=schema.value, elapsed_ms=elapsed)
        return Ok(ExtractionResult(schema, data, elapsed, ExtractionMethod.VISION), elapsed)

    def _parse_and_validate(self, schema: ExtractionSchema, raw: str) -> dict[str, Any]:
        Log.debug(f"AI raw response:\n{raw}")
        return validate_payload(schema, self._parse_json(raw))

    @staticmethod
    def _parse_json(raw: str) -> Any:
        cleaned = raw.strip()
        if cleaned.startswith("```"):
            lines = cleaned.splitlines()
            if lines and lines[0].startswith("```"):
                lines = lines[1:]
            if lines and lines[-1].strip() == "```":
                lines = lines[:-1]
            cleaned = "\n".join(lines)

        try:
            return json.loads(cleaned)
        except json.JSONDecodeError as exc:
            raise ExtractionError(f"Invalid JSON response: {exc}") from exc

    @staticmethod
    def _finish(outcome: ExtractionOutcome, started: float) -> ExtractionOutcome:
        finished = dataclasses.replace(outcome, elapsed_ms=_elapsed_ms(started))
        if isinstance(finished, Ok):
            Log.info(
                "Extraction succeeded",
                schema=finished.result.schema_used.value,
                method=finished.result.method.value,
                elapsed_ms=finished.elapsed_ms,
            )
        else:
            Log.error(
                "Extraction failed",
                outcome=type(finished).__name__,
                cause=finished.cause,
                elapsed_ms=finished.elapsed_ms,
            )
        return finished
