"""
Multi-model generation with sequential fallback.

Models are tried strictly in ascending priority. The first success wins; each
failure is recorded and the next model is tried, whatever the error was. Only
when every model has failed is a single aggregate error raised. There is no
backoff, caching of failures, or racing: every call walks the list from the
top again.
"""

from typing import Callable, Iterable, Protocol, Sequence

from returns.result import Failure, Result, Success

from ..core.config import Settings, get_settings
from ..core.logging_config import get_logger
from ..models.config import (
    AIModelConfig,
    AIProvider,
    ChatMessage,
    DEFAULT_MODEL_CONFIGS,
    FallbackRecord,
    GenerationOptions,
    GenerationResult,
)

logger = get_logger(__name__)

RATE_LIMIT_KEYWORDS = (
    "rate limit",
    "quota",
    "too many requests",
    "resource exhausted",
    "429",
    "exceeded",
)


class ModelProvider(Protocol):
    """Surface shared by GeminiService and OpenAIService."""

    def generate_content(self, prompt: str, options: GenerationOptions | None = None) -> str: ...

    def generate_with_history(
        self, messages: Sequence[ChatMessage], options: GenerationOptions | None = None
    ) -> str: ...

    def generate_content_streaming(
        self, prompt: str, on_chunk: Callable[[str], None], options: GenerationOptions | None = None
    ) -> str: ...

    def validate_api_key(self) -> bool: ...


ProviderFactory = Callable[[AIModelConfig], ModelProvider | None]


class AllProvidersFailedError(Exception):
    """Every configured model failed for one call."""

    def __init__(self, failures: Sequence[FallbackRecord], operation: str = "generation") -> None:
        self.failures = list(failures)
        self.operation = operation
        if self.failures:
            details = "; ".join(f"{f.provider.value}/{f.model}: {f.error}" for f in self.failures)
        else:
            details = "no configured providers"
        suffix = "" if operation == "generation" else f" for {operation}"
        super().__init__(f"All AI providers failed{suffix}. Errors: {details}")


def is_rate_limit_error(error: BaseException) -> bool:
    """
    Classify an error as rate limiting, for logging only.

    A structured ``status_code`` of 429 wins; otherwise the message is matched
    against known quota/rate-limit phrases.
    """
    if getattr(error, "status_code", None) == 429:
        return True
    message = str(error).lower()
    return any(keyword in message for keyword in RATE_LIMIT_KEYWORDS)


def try_models_in_order(
    models: Iterable[AIModelConfig],
    attempt: Callable[[AIModelConfig], str],
    on_failure: Callable[[FallbackRecord], None] | None = None,
    operation: str = "generation",
) -> Result[GenerationResult, AllProvidersFailedError]:
    """
    Run ``attempt`` against each model in ascending priority until one succeeds.

    Args:
        models: Candidate configs (sorted here; ties keep input order)
        attempt: Produces text for one config, raising on failure
        on_failure: Sink receiving one FallbackRecord per failed model
        operation: Label used in the aggregate error message

    Returns:
        Success(GenerationResult) from the first model that worked, or
        Failure(AllProvidersFailedError) carrying every failure
    """
    failures: list[FallbackRecord] = []

    for config in sorted(models, key=lambda m: m.priority):
        model_name = config.model or "default"
        try:
            content = attempt(config)
        except Exception as e:
            record = FallbackRecord(
                provider=config.provider,
                model=model_name,
                error=str(e) or type(e).__name__,
                rate_limited=is_rate_limit_error(e),
            )
            failures.append(record)
            if on_failure is not None:
                on_failure(record)
            continue

        return Success(GenerationResult(content=content, provider=config.provider, model=model_name))

    return Failure(AllProvidersFailedError(failures, operation))


class FallbackHistory:
    """Append-only log of failed attempts, also emitting one log line per failure."""

    def __init__(self) -> None:
        self._entries: list[FallbackRecord] = []

    def record(self, entry: FallbackRecord) -> None:
        self._entries.append(entry)
        if entry.rate_limited:
            logger.warning(
                "model_rate_limited", provider=entry.provider.value, model=entry.model, error=entry.error
            )
        else:
            logger.error("model_failed", provider=entry.provider.value, model=entry.model, error=entry.error)

    def entries(self) -> list[FallbackRecord]:
        return list(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


def build_provider(config: AIModelConfig, settings: Settings | None = None) -> ModelProvider | None:
    """Create the HTTP client for a config, or None when no API key is available."""
    from ..clients.gemini import GeminiService
    from ..clients.openai import OpenAIService

    settings = settings or get_settings()
    if config.provider == AIProvider.GEMINI:
        api_key = config.api_key or settings.gemini_api_key
        if not api_key:
            return None
        return GeminiService(api_key=api_key, model=config.model, timeout=settings.http_timeout)
    if config.provider == AIProvider.OPENAI:
        api_key = config.api_key or settings.openai_api_key
        if not api_key:
            return None
        return OpenAIService(api_key=api_key, model=config.model, timeout=settings.http_timeout)
    return None


class MultiModelService:
    """
    Ordered fallback over several LLM providers.

    Providers are built once per config; configs whose provider cannot be
    built (typically a missing API key) are skipped without being recorded.
    """

    def __init__(
        self,
        configs: Sequence[AIModelConfig] | None = None,
        provider_factory: ProviderFactory | None = None,
        history: FallbackHistory | None = None,
    ) -> None:
        self.configs = sorted(configs or DEFAULT_MODEL_CONFIGS, key=lambda m: m.priority)
        self.history = history or FallbackHistory()
        factory = provider_factory or build_provider

        self._providers: dict[int, ModelProvider] = {}
        for index, config in enumerate(self.configs):
            provider = factory(config)
            if provider is None:
                logger.info("model_skipped_unconfigured", model=config.label)
                continue
            self._providers[index] = provider

        logger.info(
            "multi_model_init",
            models=[self.configs[i].label for i in sorted(self._providers)],
        )

    def _available(self) -> list[tuple[AIModelConfig, ModelProvider]]:
        return [(self.configs[i], self._providers[i]) for i in sorted(self._providers)]

    def _run(self, attempt: Callable[[ModelProvider], str], operation: str) -> GenerationResult:
        available = self._available()
        by_config = {id(config): provider for config, provider in available}

        def _attempt(config: AIModelConfig) -> str:
            logger.debug("model_attempt", model=config.label, operation=operation)
            return attempt(by_config[id(config)])

        result = try_models_in_order(
            [config for config, _ in available], _attempt, self.history.record, operation
        )
        if isinstance(result, Failure):
            error = result.failure()
            logger.error("all_models_failed", operation=operation, attempts=len(error.failures))
            raise error

        value = result.unwrap()
        logger.info("model_succeeded", provider=value.provider.value, model=value.model)
        return value

    def generate_content(self, prompt: str, options: GenerationOptions | None = None) -> GenerationResult:
        """
        Generate text with the first model that succeeds.

        Raises:
            AllProvidersFailedError: If every model failed
        """
        return self._run(lambda provider: provider.generate_content(prompt, options), "generation")

    def generate_with_history(
        self, messages: Sequence[ChatMessage], options: GenerationOptions | None = None
    ) -> GenerationResult:
        """Multi-turn variant of generate_content."""
        return self._run(
            lambda provider: provider.generate_with_history(messages, options), "generation"
        )

    def generate_streaming(
        self,
        prompt: str,
        on_chunk: Callable[[str], None],
        options: GenerationOptions | None = None,
    ) -> GenerationResult:
        """
        Stream from the first model that succeeds.

        Chunks already delivered by a model that later fails are not retracted.
        """
        return self._run(
            lambda provider: provider.generate_content_streaming(prompt, on_chunk, options),
            "streaming",
        )

    def get_fallback_history(self) -> list[FallbackRecord]:
        return self.history.entries()

    def clear_fallback_history(self) -> None:
        self.history.clear()

    def get_available_providers(self) -> list[AIModelConfig]:
        """Configs that have a usable client, in priority order."""
        return [config for config, _ in self._available()]

    def check_provider_health(self, provider: AIProvider) -> bool:
        """Validate the API key of the first configured model of ``provider``."""
        for config, client in self._available():
            if config.provider == provider:
                try:
                    return client.validate_api_key()
                except Exception as e:
                    logger.error("provider_health_check_failed", provider=provider.value, error=str(e))
                    return False
        return False

    def close(self) -> None:
        """Release provider HTTP clients."""
        for provider in self._providers.values():
            close = getattr(provider, "close", None)
            if close is not None:
                close()
