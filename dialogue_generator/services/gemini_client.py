"""Adapter for the Gemini ``generateContent`` REST endpoint."""

from __future__ import annotations

import logging
from typing import Any, Protocol

import httpx

from dialogue_generator.config import Settings
from dialogue_generator.exceptions import ConfigurationError, ProviderError

logger = logging.getLogger(__name__)

MISSING_KEY_MESSAGE = "API key not configured. Please add your Gemini API key to continue."
INVALID_KEY_MESSAGE = "API key is malformed. Please check your Gemini API key and try again."

# Finish reasons for which the provider withholds the candidate text.
_BLOCKED_FINISH_REASONS = frozenset(
    {"SAFETY", "RECITATION", "BLOCKLIST", "PROHIBITED_CONTENT", "SPII"}
)


class TextGenerator(Protocol):
    """Anything that turns a single prompt into generated text."""

    async def generate(self, prompt: str) -> str: ...


class GeminiClient:
    """Wrapper around Gemini's text generation endpoint."""

    def __init__(self, client: httpx.AsyncClient, settings: Settings) -> None:
        self._client = client
        self._settings = settings

    @property
    def endpoint(self) -> str:
        base_url = self._settings.gemini_base_url.rstrip("/")
        return f"{base_url}/models/{self._settings.generation_model}:generateContent"

    async def generate(self, prompt: str) -> str:
        """Generate text for ``prompt`` with the configured model.

        Raises ConfigurationError without touching the network when no usable
        API key is configured, and ProviderError for every failed or blocked call.
        Empty generated text is returned as is.
        """

        if not self._settings.has_api_key:
            logger.error("Gemini API key is not configured")
            raise ConfigurationError(MISSING_KEY_MESSAGE)

        api_key = self._settings.gemini_api_key.strip()
        if not api_key.isascii():
            logger.error("Gemini API key contains non-ASCII characters")
            raise ConfigurationError(INVALID_KEY_MESSAGE)

        payload = {
            "contents": [
                {"role": "user", "parts": [{"text": prompt}]},
            ],
        }

        headers = {
            "x-goog-api-key": api_key,
            "Content-Type": "application/json",
        }

        try:
            response = await self._client.post(
                self.endpoint,
                headers=headers,
                json=payload,
                timeout=self._settings.generation_timeout,
            )
            response.raise_for_status()
        except httpx.TimeoutException as exc:
            logger.warning("Gemini generation timed out", exc_info=exc)
            raise ProviderError("Generation service timed out") from exc
        except httpx.HTTPStatusError as exc:
            detail = _provider_message(exc.response)
            logger.error(
                "Gemini generation failed",
                extra={
                    "status_code": exc.response.status_code,
                    "provider_message": detail,
                },
            )
            message = "Generation service returned an error"
            if detail:
                message = f"{message}: {detail}"
            raise ProviderError(message, status_code=exc.response.status_code) from exc
        except httpx.HTTPError as exc:
            logger.exception("Unexpected Gemini HTTP error")
            raise ProviderError("Generation service request failed") from exc

        try:
            data = response.json()
        except ValueError as exc:
            logger.error("Gemini response is not JSON", extra={"raw_response": response.text})
            raise ProviderError("Invalid generation response payload") from exc

        text = _extract_text(data)
        logger.info(
            "Gemini generation completed",
            extra={"model": self._settings.generation_model, "chars": len(text)},
        )
        return text.strip()


def _extract_text(data: Any) -> str:
    """Join the text parts of the first candidate."""

    if not isinstance(data, dict):
        logger.error("Malformed Gemini response", extra={"raw_response": data})
        raise ProviderError("Invalid generation response payload")

    candidates = data.get("candidates")
    if not candidates:
        feedback = data.get("promptFeedback")
        block_reason = feedback.get("blockReason") if isinstance(feedback, dict) else None
        if block_reason:
            logger.warning("Gemini blocked the prompt", extra={"block_reason": block_reason})
            raise ProviderError(f"The request was blocked by the provider ({block_reason})")
        return ""

    try:
        candidate = candidates[0]
        finish_reason = candidate.get("finishReason")
        parts = (candidate.get("content") or {}).get("parts") or []
        texts = [part.get("text", "") for part in parts]
    except (AttributeError, IndexError, KeyError, TypeError) as exc:
        logger.error("Malformed Gemini response", extra={"raw_response": data})
        raise ProviderError("Invalid generation response payload") from exc

    if isinstance(finish_reason, str) and finish_reason in _BLOCKED_FINISH_REASONS:
        logger.warning("Gemini withheld the response", extra={"finish_reason": finish_reason})
        raise ProviderError(f"The response was blocked by the provider ({finish_reason})")

    return "".join(text for text in texts if isinstance(text, str))


def _provider_message(response: httpx.Response) -> str | None:
    """Pull ``error.message`` out of a Gemini error body, if there is one."""

    try:
        body = response.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None
    error = body.get("error")
    if isinstance(error, dict) and isinstance(error.get("message"), str):
        return error["message"]
    return None
