"""
Model configuration with strong typing.
Provider fallback entries and per-call generation options.
"""

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class AIProvider(str, Enum):
    """Supported LLM providers."""

    GEMINI = "gemini"
    OPENAI = "openai"


class GeminiModel(str, Enum):
    """Known Gemini model variants."""

    FLASH = "gemini-1.5-flash"  # Default, fast and cheap
    PRO = "gemini-1.5-pro"
    FLASH_2 = "gemini-2.0-flash"


class AIModelConfig(BaseModel):
    """One entry in the ordered fallback list. Lower ``priority`` is tried first."""

    model_config = ConfigDict(frozen=True, use_enum_values=False)

    provider: AIProvider
    model: str | None = Field(default=None)
    priority: int = Field(default=1, ge=0)
    api_key: str | None = Field(default=None, repr=False)

    @property
    def label(self) -> str:
        """``provider/model`` for logs and aggregate errors."""
        return f"{self.provider.value}/{self.model or 'default'}"


class GenerationOptions(BaseModel):
    """Per-call generation parameters."""

    model_config = ConfigDict(frozen=True)

    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(default=2048, ge=1)
    system_instruction: str | None = Field(default=None)

    def with_updates(self, **updates) -> "GenerationOptions":
        """Create updated options (immutable pattern)."""
        return self.model_copy(update=updates)


class ChatMessage(BaseModel):
    """One turn of a multi-turn prompt."""

    model_config = ConfigDict(frozen=True)

    role: str = Field(pattern="^(system|user|assistant)$")
    content: str


class GenerationResult(BaseModel):
    """Successful generation with the provider that produced it."""

    model_config = ConfigDict(frozen=True)

    content: str
    provider: AIProvider
    model: str


class FallbackRecord(BaseModel):
    """One failed attempt in the fallback chain."""

    model_config = ConfigDict(frozen=True)

    provider: AIProvider
    model: str
    error: str
    rate_limited: bool = False
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


DEFAULT_MODEL_CONFIGS: tuple[AIModelConfig, ...] = (
    AIModelConfig(provider=AIProvider.GEMINI, model=GeminiModel.FLASH.value, priority=1),
    AIModelConfig(provider=AIProvider.OPENAI, model="gpt-4-turbo-preview", priority=2),
)
