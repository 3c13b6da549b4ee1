import base64
from typing import Any

import httpx
import openai

from finingest.extraction.client_base import BaseExtractionClient
from finingest.extraction.exceptions import (
    ExtractionError,
    ExtractionNetworkError,
    ExtractionSchemaError,
    ExtractionTimeoutError,
)


class OpenAIClientAdapter(BaseExtractionClient):
    """Extraction oracle client built on the OpenAI-compatible chat API."""

    def __init__(
        self,
        *,
        api_key: str,
        timeout_seconds: int,
        base_url: str | None = None,
    ) -> None:
        self._timeout_seconds = timeout_seconds
        # the SDK would otherwise resend timed-out and 5xx requests on its own
        self._client = openai.OpenAI(
            api_key=api_key,
            timeout=timeout_seconds,
            base_url=base_url,
            max_retries=0,
        )

    def complete_with_document(
        self,
        *,
        model: str,
        instruction: str,
        document: bytes,
        filename: str,
        json_schema: dict[str, object],
        schema_name: str,
        timeout_seconds: float | None = None,
    ) -> str:
        encoded = base64.b64encode(document).decode("ascii")
        content = [
            {"type": "text", "text": instruction},
            {
                "type": "file",
                "file": {
                    "filename": filename,
                    "file_data": f"data:application/pdf;base64,{encoded}",
                },
            },
        ]
        return self._complete(
            model=model,
            messages=[{"role": "user", "content": content}],
            json_schema=json_schema,
            schema_name=schema_name,
            timeout_seconds=timeout_seconds,
        )

    def complete_with_text(
        self,
        *,
        model: str,
        instruction: str,
        json_schema: dict[str, object],
        schema_name: str,
        timeout_seconds: float | None = None,
    ) -> str:
        return self._complete(
            model=model,
            messages=[{"role": "user", "content": instruction}],
            json_schema=json_schema,
            schema_name=schema_name,
            timeout_seconds=timeout_seconds,
        )

    def _complete(
        self,
        *,
        model: str,
        messages: list[dict[str, Any]],
        json_schema: dict[str, object],
        schema_name: str,
        timeout_seconds: float | None,
    ) -> str:
        options: dict[str, Any] = {}
        if timeout_seconds is not None:
            options["timeout"] = timeout_seconds
        try:
            response = self._client.chat.completions.create(
                model=model,
                temperature=0.0,
                response_format={
                    "type": "json_schema",
                    "json_schema": {
                        "name": schema_name,
                        "strict": True,
                        "schema": json_schema,
                    },
                },
                messages=messages,
                **options,
            )
        # APITimeoutError subclasses APIConnectionError, so it must come first
        except (openai.APITimeoutError, httpx.TimeoutException) as exc:
            raise ExtractionTimeoutError(
                timeout_seconds if timeout_seconds is not None else self._timeout_seconds
            ) from exc
        except (openai.APIConnectionError, httpx.ConnectError) as exc:
            raise ExtractionNetworkError(f"AI provider network error: {exc}") from exc
        except openai.BadRequestError as exc:
            raise ExtractionSchemaError(f"AI provider rejected the request: {exc}") from exc
        except openai.APIError as exc:
            raise ExtractionNetworkError(f"AI provider API error: {exc}") from exc

        if not response.choices:
            raise ExtractionError("AI returned no choices")
        message = response.choices[0].message
        refusal = getattr(message, "refusal", None)
        if refusal:
            raise ExtractionSchemaError(f"AI refused the extraction: {refusal}")
        if message.content is None:
            raise ExtractionError("AI returned empty response")
        return message.content
