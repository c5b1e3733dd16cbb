"""OpenAI chat completions client, used as a fallback provider."""

import json
from typing import Any, Callable, Sequence

import httpx

from ..core.logging_config import get_logger
from ..models.config import ChatMessage, GenerationOptions

logger = get_logger(__name__)

OPENAI_BASE_URL = "https://api.openai.com/v1"
DEFAULT_OPENAI_MODEL = "gpt-4-turbo-preview"


class OpenAIAPIError(Exception):
    """OpenAI request failed or returned no usable content."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class OpenAIService:
    """HTTP client for one OpenAI chat model."""

    def __init__(
        self,
        api_key: str,
        model: str | None = None,
        timeout: float = 60.0,
        base_url: str = OPENAI_BASE_URL,
        client: httpx.Client | None = None,
    ) -> None:
        if not api_key:
            raise ValueError("OpenAI API key is required")
        self.model = model or DEFAULT_OPENAI_MODEL
        self.base_url = base_url.rstrip("/")
        self._headers = {"Authorization": f"Bearer {api_key}"}
        self._client = client or httpx.Client(timeout=timeout)

    @staticmethod
    def _messages(prompt: str, options: GenerationOptions) -> list[dict[str, str]]:
        messages = []
        if options.system_instruction:
            messages.append({"role": "system", "content": options.system_instruction})
        messages.append({"role": "user", "content": prompt})
        return messages

    def _body(self, messages: list[dict[str, str]], options: GenerationOptions, stream: bool) -> dict[str, Any]:
        return {
            "model": self.model,
            "messages": messages,
            "temperature": options.temperature,
            "max_tokens": options.max_tokens,
            "stream": stream,
        }

    @staticmethod
    def _error_from_response(response: httpx.Response) -> OpenAIAPIError:
        message = "Unknown error"
        try:
            message = response.json().get("error", {}).get("message") or message
        except (ValueError, AttributeError):
            pass
        return OpenAIAPIError(f"OpenAI API error: {message}", status_code=response.status_code)

    def create_chat_completion(
        self, messages: list[dict[str, str]], options: GenerationOptions | None = None
    ) -> str:
        """
        Non-streaming chat completion.

        Raises:
            OpenAIAPIError: On an error status or an empty choice list
            httpx.HTTPError: On transport failures
        """
        options = options or GenerationOptions()
        response = self._client.post(
            f"{self.base_url}/chat/completions",
            headers=self._headers,
            json=self._body(messages, options, stream=False),
        )
        if response.is_error:
            raise self._error_from_response(response)

        choices = response.json().get("choices") or []
        if not choices:
            raise OpenAIAPIError("No response from OpenAI (empty choices)")
        return choices[0].get("message", {}).get("content") or ""

    def generate_content(self, prompt: str, options: GenerationOptions | None = None) -> str:
        options = options or GenerationOptions()
        return self.create_chat_completion(self._messages(prompt, options), options)

    def generate_with_history(
        self, messages: Sequence[ChatMessage], options: GenerationOptions | None = None
    ) -> str:
        options = options or GenerationOptions()
        payload = [{"role": m.role, "content": m.content} for m in messages]
        if options.system_instruction and not any(m.role == "system" for m in messages):
            payload.insert(0, {"role": "system", "content": options.system_instruction})
        return self.create_chat_completion(payload, options)

    def generate_content_streaming(
        self,
        prompt: str,
        on_chunk: Callable[[str], None],
        options: GenerationOptions | None = None,
    ) -> str:
        """Stream a completion over SSE; returns the full text."""
        options = options or GenerationOptions()
        chunks: list[str] = []

        with self._client.stream(
            "POST",
            f"{self.base_url}/chat/completions",
            headers=self._headers,
            json=self._body(self._messages(prompt, options), options, stream=True),
        ) as response:
            if response.is_error:
                response.read()
                raise self._error_from_response(response)

            for line in response.iter_lines():
                if not line.startswith("data: "):
                    continue
                data = line[6:].strip()
                if data == "[DONE]":
                    break
                try:
                    text = json.loads(data)["choices"][0]["delta"].get("content")
                except (json.JSONDecodeError, KeyError, IndexError, TypeError, AttributeError):
                    logger.warning("sse_chunk_skipped", line=line[:120])
                    continue
                if text:
                    chunks.append(text)
                    on_chunk(text)

        return "".join(chunks)

    def validate_api_key(self) -> bool:
        try:
            response = self._client.get(f"{self.base_url}/models", headers=self._headers)
            return not response.is_error
        except httpx.HTTPError as e:
            logger.warning("openai_key_check_failed", error=str(e))
            return False

    def list_models(self) -> list[str]:
        """Chat model ids (``gpt*``) available to this key."""
        response = self._client.get(f"{self.base_url}/models", headers=self._headers)
        if response.is_error:
            raise self._error_from_response(response)
        return [m["id"] for m in response.json().get("data", []) if m.get("id", "").startswith("gpt")]

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "OpenAIService":
        return self

    def __exit__(self, *args) -> None:
        self.close()
