"""Dependency Injection Container."""

from injector import Injector, Module, provider, singleton

from ..agents.examples import ExamplesSearchService
from ..agents.generator import AIGeneratorService
from ..agents.multi_model import MultiModelService, build_provider
from ..builder.store import BuilderStore
from ..clients.pages import PagesClient
from ..clients.search import InspirationSearchClient
from ..models.config import AIModelConfig, AIProvider
from .config import Settings, get_settings


class CoreModule(Module):
    """Core dependencies."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings

    @singleton
    @provider
    def provide_settings(self) -> Settings:
        return self.settings or get_settings()

    @singleton
    @provider
    def provide_multi_model(self, settings: Settings) -> MultiModelService:
        """Provide the Gemini-first, OpenAI-fallback model chain."""
        configs = [
            AIModelConfig(provider=AIProvider.GEMINI, model=settings.gemini_model, priority=1),
            AIModelConfig(provider=AIProvider.OPENAI, model=settings.openai_model, priority=2),
        ]
        return MultiModelService(configs, provider_factory=lambda c: build_provider(c, settings))

    @singleton
    @provider
    def provide_search_client(self, settings: Settings) -> InspirationSearchClient:
        return InspirationSearchClient(
            api_key=settings.serp_api_key,
            fail_max=settings.breaker_fail_max,
            reset_timeout=settings.breaker_reset_timeout,
        )

    @singleton
    @provider
    def provide_examples(self, search_client: InspirationSearchClient) -> ExamplesSearchService:
        return ExamplesSearchService(search_client=search_client)

    @singleton
    @provider
    def provide_generator(
        self, multi_model: MultiModelService, examples: ExamplesSearchService
    ) -> AIGeneratorService:
        """Provide page generator with all dependencies."""
        return AIGeneratorService(multi_model=multi_model, examples=examples)

    @singleton
    @provider
    def provide_pages_client(self, settings: Settings) -> PagesClient:
        return PagesClient(
            base_url=settings.pages_api_url,
            timeout=settings.pages_api_timeout,
            fail_max=settings.breaker_fail_max,
            reset_timeout=settings.breaker_reset_timeout,
        )

    @provider
    def provide_store(self, settings: Settings) -> BuilderStore:
        """New editor store on every injection."""
        return BuilderStore(max_history=settings.max_history_size)


def create_container(settings: Settings | None = None) -> Injector:
    """Create configured injector."""
    return Injector([CoreModule(settings)])
