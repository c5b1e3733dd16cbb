"""
Gemini REST client.

Talks to the Generative Language API directly over HTTP: one-shot
generation, multi-turn generation, SSE streaming and model listing.
"""

import json
from typing import Any, Callable, Sequence

import httpx

from ..core.logging_config import get_logger
from ..models.config import ChatMessage, GeminiModel, GenerationOptions

logger = get_logger(__name__)

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"

ChunkCallback = Callable[[str], None]


class GeminiAPIError(Exception):
    """Gemini request failed or returned no usable content."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def _strip_data_url(image: str) -> str:
    # "data:image/jpeg;base64,AAAA" -> "AAAA"
    if image.startswith("data:") and "," in image:
        return image.split(",", 1)[1]
    return image


class GeminiService:
    """HTTP client for one Gemini model."""

    def __init__(
        self,
        api_key: str,
        model: str | None = None,
        timeout: float = 60.0,
        base_url: str = GEMINI_BASE_URL,
        client: httpx.Client | None = None,
    ) -> None:
        if not api_key:
            raise ValueError("Gemini API key is required")
        self.api_key = api_key
        self.model = model or GeminiModel.FLASH.value
        self.base_url = base_url.rstrip("/")
        self._client = client or httpx.Client(timeout=timeout)

        logger.debug("gemini_client_init", model=self.model)

    # ------------------------------------------------------------------
    # Request building
    # ------------------------------------------------------------------

    def _url(self, action: str) -> str:
        return f"{self.base_url}/models/{self.model}:{action}"

    @staticmethod
    def _body(
        contents: list[dict[str, Any]], options: GenerationOptions
    ) -> dict[str, Any]:
        body: dict[str, Any] = {
            "contents": contents,
            "generationConfig": {
                "temperature": options.temperature,
                "maxOutputTokens": options.max_tokens,
            },
        }
        if options.system_instruction:
            body["systemInstruction"] = {"parts": [{"text": options.system_instruction}]}
        return body

    @staticmethod
    def _error_from_response(response: httpx.Response) -> GeminiAPIError:
        message = "Unknown error"
        try:
            payload = response.json()
            message = payload.get("error", {}).get("message") or message
        except (ValueError, AttributeError):
            pass
        return GeminiAPIError(f"Gemini API error: {message}", status_code=response.status_code)

    @staticmethod
    def _text_from_payload(payload: dict[str, Any]) -> str:
        candidates = payload.get("candidates") or []
        if not candidates:
            raise GeminiAPIError("No response from Gemini (empty candidates)")

        candidate = candidates[0]
        parts = (candidate.get("content") or {}).get("parts") or []
        if not parts or "text" not in parts[0]:
            finish_reason = candidate.get("finishReason", "UNKNOWN")
            raise GeminiAPIError(
                f"Gemini response missing content. Finish reason: {finish_reason}. "
                "Request might have been blocked or failed."
            )
        return "".join(part.get("text", "") for part in parts)

    def _generate(self, contents: list[dict[str, Any]], options: GenerationOptions) -> str:
        response = self._client.post(
            self._url("generateContent"),
            params={"key": self.api_key},
            json=self._body(contents, options),
        )
        if response.is_error:
            raise self._error_from_response(response)
        return self._text_from_payload(response.json())

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def generate_content(
        self,
        prompt: str,
        options: GenerationOptions | None = None,
        images: Sequence[str] | None = None,
    ) -> str:
        """
        Generate text for a single prompt.

        Args:
            prompt: User prompt
            options: Temperature, token limit and system instruction
            images: Optional base64 JPEG payloads (data URLs accepted)

        Returns:
            Generated text

        Raises:
            GeminiAPIError: On an error status or a response without content
            httpx.HTTPError: On transport failures
        """
        options = options or GenerationOptions()
        parts: list[dict[str, Any]] = [{"text": prompt}]
        for image in images or ():
            parts.append({"inline_data": {"mime_type": "image/jpeg", "data": _strip_data_url(image)}})
        return self._generate([{"parts": parts}], options)

    def generate_with_history(
        self, messages: Sequence[ChatMessage], options: GenerationOptions | None = None
    ) -> str:
        """Multi-turn generation. System messages become the system instruction."""
        options = options or GenerationOptions()
        system = [m.content for m in messages if m.role == "system"]
        if system and not options.system_instruction:
            options = options.with_updates(system_instruction="\n\n".join(system))

        contents = [
            {"role": "model" if m.role == "assistant" else "user", "parts": [{"text": m.content}]}
            for m in messages
            if m.role != "system"
        ]
        return self._generate(contents, options)

    def generate_content_streaming(
        self,
        prompt: str,
        on_chunk: ChunkCallback,
        options: GenerationOptions | None = None,
    ) -> str:
        """
        Stream generation over SSE, calling ``on_chunk`` for each text delta.

        Returns:
            The full concatenated text
        """
        options = options or GenerationOptions()
        body = self._body([{"parts": [{"text": prompt}]}], options)
        chunks: list[str] = []

        with self._client.stream(
            "POST",
            self._url("streamGenerateContent"),
            params={"key": self.api_key, "alt": "sse"},
            json=body,
        ) as response:
            if response.is_error:
                response.read()
                raise self._error_from_response(response)

            for line in response.iter_lines():
                if not line.startswith("data: "):
                    continue
                try:
                    payload = json.loads(line[6:])
                    text = payload["candidates"][0]["content"]["parts"][0]["text"]
                except (json.JSONDecodeError, KeyError, IndexError, TypeError):
                    logger.warning("sse_chunk_skipped", line=line[:120])
                    continue
                if text:
                    chunks.append(text)
                    on_chunk(text)

        return "".join(chunks)

    def validate_api_key(self) -> bool:
        """Cheap round trip to check the key works."""
        try:
            self.generate_content("Hello", GenerationOptions(max_tokens=5))
            return True
        except (GeminiAPIError, httpx.HTTPError) as e:
            logger.warning("gemini_key_invalid", error=str(e))
            return False

    def list_models(self) -> list[str]:
        """Gemini model names available to this key, without the ``models/`` prefix."""
        response = self._client.get(f"{self.base_url}/models", params={"key": self.api_key})
        if response.is_error:
            raise self._error_from_response(response)
        models = response.json().get("models", [])
        return [
            m["name"].removeprefix("models/")
            for m in models
            if "gemini" in m.get("name", "")
        ]

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "GeminiService":
        return self

    def __exit__(self, *args) -> None:
        self.close()
