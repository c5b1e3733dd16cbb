"""Provider and generation models."""

from .config import (
    AIModelConfig,
    AIProvider,
    ChatMessage,
    DEFAULT_MODEL_CONFIGS,
    FallbackRecord,
    GeminiModel,
    GenerationOptions,
    GenerationResult,
)

__all__ = [
    "AIModelConfig",
    "AIProvider",
    "ChatMessage",
    "DEFAULT_MODEL_CONFIGS",
    "FallbackRecord",
    "GeminiModel",
    "GenerationOptions",
    "GenerationResult",
]
