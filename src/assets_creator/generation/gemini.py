"""Gemini client used by the `call_gemini` tool.

Talks to the Gemini REST API (`models/{model}:generateContent`) over httpx.
Construction fails without an API key; the server then keeps running with
generation disabled.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"


class GeminiError(Exception):
    """Base exception for Gemini client failures."""

    pass


class GeminiConfigError(GeminiError):
    """Raised when the client cannot be constructed."""

    pass


class GeminiRequestError(GeminiError):
    """Raised when a generate call fails or yields no text."""

    pass


class GeminiClient:
    """Minimal async client for Gemini text generation.

    Usage:
        client = GeminiClient("gemini-nano-banana", api_key)
        text = await client.generate("Draw a sword sprite", temperature=0.4)
        await client.close()
    """

    def __init__(
        self,
        model: str,
        api_key: str | None,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 60.0,
    ):
        """Initialize the Gemini client.

        Args:
            model: Gemini model identifier.
            api_key: Gemini API key.
            base_url: API root, without trailing slash.
            timeout: HTTP request timeout in seconds.

        Raises:
            GeminiConfigError: If the API key or model name is empty.
        """
        if not api_key:
            raise GeminiConfigError(
                "GOOGLE_API_KEY is not set. Export your Gemini API key before "
                "launching the server."
            )
        if not model:
            raise GeminiConfigError("Gemini model name must not be empty.")

        self.model = model
        self.base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._http_client = httpx.AsyncClient(timeout=timeout)
        logger.debug(f'Initialized Gemini client with model "{model}"')

    async def generate(
        self,
        prompt: str,
        system_prompt: str | None = None,
        temperature: float | None = None,
        top_p: float | None = None,
    ) -> str:
        """Generate text for a prompt.

        Args:
            prompt: User prompt.
            system_prompt: Optional system instruction.
            temperature: Optional sampling temperature.
            top_p: Optional nucleus sampling threshold.

        Returns:
            str: Generated text, never empty.

        Raises:
            GeminiRequestError: If the prompt is empty, the HTTP call fails, or
                the response carries no text.
        """
        if not prompt or not isinstance(prompt, str):
            raise GeminiRequestError("'prompt' must be a non-empty string.")

        endpoint = f"{self.base_url}/models/{self.model}:generateContent"
        payload = self._build_request_payload(prompt, system_prompt, temperature, top_p)
        headers = {
            "Content-Type": "application/json",
            "x-goog-api-key": self._api_key,
        }

        logger.debug(f"Calling Gemini model {self.model}")
        try:
            response = await self._http_client.post(
                endpoint, json=payload, headers=headers
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            raise GeminiRequestError(
                f"Gemini call failed: HTTP {e.response.status_code}: "
                f"{_error_detail(e.response)}"
            ) from e
        except httpx.HTTPError as e:
            raise GeminiRequestError(f"Gemini call failed: {e}") from e
        except ValueError as e:
            raise GeminiRequestError(f"Gemini call failed: invalid JSON: {e}") from e

        text = self._extract_text(data)
        if not text:
            raise GeminiRequestError("Gemini response did not contain text output.")
        return text

    def _build_request_payload(
        self,
        prompt: str,
        system_prompt: str | None,
        temperature: float | None,
        top_p: float | None,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
        }
        if system_prompt:
            payload["systemInstruction"] = {"parts": [{"text": system_prompt}]}

        generation_config: dict[str, Any] = {}
        if temperature is not None:
            generation_config["temperature"] = temperature
        if top_p is not None:
            generation_config["topP"] = top_p
        if generation_config:
            payload["generationConfig"] = generation_config

        return payload

    def _extract_text(self, data: Any) -> str:
        """Join the text parts of the first candidate.

        Gemini response structure:
        {
            "candidates": [
                {"content": {"parts": [{"text": "..."}], "role": "model"}}
            ]
        }
        """
        if not isinstance(data, dict):
            return ""
        candidates = data.get("candidates") or []
        if not candidates:
            logger.warning("Gemini response has no candidates")
            return ""

        content = candidates[0].get("content") or {}
        parts = content.get("parts") or []
        return "".join(
            part["text"]
            for part in parts
            if isinstance(part, dict) and isinstance(part.get("text"), str)
        )

    async def close(self) -> None:
        """Close the HTTP client and clean up resources."""
        await self._http_client.aclose()


def _error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
        return body["error"]["message"]
    except (ValueError, KeyError, TypeError):
        return response.text
