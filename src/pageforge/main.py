"""
PageForge HTTP service.

Exposes page generation, element editing, copy and SEO suggestions, design
references, A/B copy variants and A/B result analysis over FastAPI.
Services come from the injector container.
"""

from contextlib import asynccontextmanager
from dataclasses import asdict
from typing import Any

from fastapi import Body, Depends, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from injector import Injector
from pydantic import ValidationError as PydanticValidationError

from .abtest import ExperimentResults, analyze_experiment
from .agents.examples import ExamplesSearchService
from .agents.generator import AIGeneratorService, GeneratedPageError
from .agents.multi_model import AllProvidersFailedError, MultiModelService
from .builder.elements import element_from_dict
from .clients.pages import PagesClient
from .clients.search import InspirationSearchClient
from .core.config import Settings
from .core.container import create_container
from .core.json import JSONParseError
from .core.logging_config import LogContext, configure_logging, get_logger
from .core.validate import (
    EditElementRequest,
    OptimizeRequest,
    PageGenerationRequest,
    SuggestRequest,
    ValidationError,
    VariantSuggestionRequest,
)
from .markup.parser import GeneratedHTMLError

logger = get_logger(__name__)

SERVICE_NAME = "pageforge"
VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging on startup, release HTTP clients on shutdown."""
    settings = app.state.container.get(Settings)
    configure_logging(settings.log_level, settings.json_logs)
    logger.info("service_starting", service=SERVICE_NAME, version=VERSION)

    yield

    logger.info("service_stopping", service=SERVICE_NAME)
    for service_type in (MultiModelService, PagesClient, InspirationSearchClient):
        try:
            app.state.container.get(service_type).close()
        except Exception as e:
            logger.error(
                "shutdown_cleanup_failed", service=service_type.__name__, error=str(e), exc_info=True
            )


# ----------------------------------------------------------------------
# Dependencies
# ----------------------------------------------------------------------


def get_container(request: Request) -> Injector:
    return request.app.state.container


def get_generator(container: Injector = Depends(get_container)) -> AIGeneratorService:
    return container.get(AIGeneratorService)


def get_multi_model(container: Injector = Depends(get_container)) -> MultiModelService:
    return container.get(MultiModelService)


def get_examples(container: Injector = Depends(get_container)) -> ExamplesSearchService:
    return container.get(ExamplesSearchService)


# ----------------------------------------------------------------------
# Error mapping
# ----------------------------------------------------------------------


def _error(status_code: int, message: str, **extra: Any) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message, **extra})


async def _invalid_payload(request: Request, exc: PydanticValidationError) -> JSONResponse:
    details = [{"loc": list(err["loc"]), "msg": err["msg"]} for err in exc.errors()]
    logger.warning("request_invalid", path=request.url.path, errors=len(details))
    return _error(400, "Invalid request", details=details)


async def _invalid_request(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [{"loc": list(err["loc"]), "msg": err["msg"]} for err in exc.errors()]
    return _error(400, "Invalid request", details=details)


async def _invalid_value(request: Request, exc: ValidationError) -> JSONResponse:
    return _error(400, str(exc))


async def _upstream_failed(request: Request, exc: Exception) -> JSONResponse:
    logger.error("upstream_generation_failed", path=request.url.path, error=str(exc))
    return _error(502, str(exc))


# ----------------------------------------------------------------------
# App
# ----------------------------------------------------------------------


def create_app(container: Injector | None = None) -> FastAPI:
    """Build the FastAPI app around ``container`` (default: from settings)."""
    app = FastAPI(
        title="PageForge Service",
        description="AI page generation and element editing for the no-code page builder",
        version=VERSION,
        lifespan=lifespan,
    )
    app.state.container = container or create_container()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(PydanticValidationError, _invalid_payload)
    app.add_exception_handler(RequestValidationError, _invalid_request)
    app.add_exception_handler(ValidationError, _invalid_value)
    for exc_type in (AllProvidersFailedError, GeneratedHTMLError, GeneratedPageError, JSONParseError):
        app.add_exception_handler(exc_type, _upstream_failed)

    @app.get("/health")
    def health():
        return {"status": "healthy", "service": SERVICE_NAME, "version": VERSION}

    @app.get("/api/ai/status")
    def ai_status(multi_model: MultiModelService = Depends(get_multi_model)):
        """Configured providers, their key validity and recent fallbacks."""
        providers = [
            {
                "provider": config.provider.value,
                "model": config.model,
                "priority": config.priority,
                "valid": multi_model.check_provider_health(config.provider),
            }
            for config in multi_model.get_available_providers()
        ]
        history = [
            record.model_dump(mode="json", by_alias=True) for record in multi_model.get_fallback_history()
        ]
        return {"providers": providers, "fallbackHistory": history}

    @app.post("/api/ai/generate-page")
    def generate_page(
        payload: dict[str, Any] = Body(...),
        mode: str = Query(default="html", pattern="^(html|components)$"),
        generator: AIGeneratorService = Depends(get_generator),
    ):
        request = PageGenerationRequest.model_validate(payload)
        with LogContext(route="generate-page", page_type=request.page_type, mode=mode):
            if mode == "components":
                page = generator.generate_page_components(request)
            else:
                page = generator.generate_page(request)
        return {"page": page.model_dump(mode="json", by_alias=True)}

    @app.post("/api/ai/edit-element")
    def edit_element(
        payload: dict[str, Any] = Body(...),
        generator: AIGeneratorService = Depends(get_generator),
    ):
        request = EditElementRequest.model_validate(payload)
        element = element_from_dict(request.element)
        with LogContext(route="edit-element", element_id=element.id):
            edited = generator.edit_element(element, request.prompt)
        return {"element": edited.model_dump(mode="json", by_alias=True)}

    @app.get("/api/ai/examples")
    def examples(
        page_type: str = Query(default="landing", alias="pageType"),
        service: ExamplesSearchService = Depends(get_examples),
    ):
        page_examples = service.get_examples_for_page_type(page_type)
        return {
            "pageType": page_examples.page_type,
            "examples": [asdict(example) for example in page_examples.examples],
            "sectionOrder": list(page_examples.section_order),
            "layoutPatterns": list(page_examples.layout_patterns),
            "conversionTips": list(page_examples.conversion_tips),
            "availablePageTypes": service.get_available_page_types(),
            "availableDesignStyles": service.get_available_design_styles(),
        }

    @app.post("/api/ab-tests/ai-variants")
    def ai_variants(
        payload: dict[str, Any] = Body(...),
        generator: AIGeneratorService = Depends(get_generator),
    ):
        request = VariantSuggestionRequest.model_validate(payload)
        variants = generator.generate_variant_suggestions(request)
        return {"variants": variants, "textType": request.text_type}

    @app.post("/api/ai/suggest")
    def suggest(
        payload: dict[str, Any] = Body(...),
        generator: AIGeneratorService = Depends(get_generator),
    ):
        """Headline or CTA variations, or SEO metadata, for a piece of content."""
        request = SuggestRequest.model_validate(payload)
        with LogContext(route="suggest", suggestion_type=request.type):
            if request.type == "seo":
                seo = generator.generate_seo_metadata(request.content, request.keywords)
                suggestions: Any = {
                    "title": seo.title,
                    "description": seo.description,
                    "keywords": seo.keywords,
                }
            else:
                context = request.context or f"{request.type} copy"
                suggestions = generator.generate_headline_variants(
                    request.content, context, request.count
                )
        return {"type": request.type, "suggestions": suggestions}

    @app.post("/api/ai/optimize")
    def optimize(
        payload: dict[str, Any] = Body(...),
        generator: AIGeneratorService = Depends(get_generator),
    ):
        request = OptimizeRequest.model_validate(payload)
        with LogContext(route="optimize", goals=len(request.goals)):
            suggestions = generator.generate_optimizations(request.content, request.goals)
        return {
            "suggestions": [s.model_dump(mode="json", by_alias=True) for s in suggestions]
        }

    @app.post("/api/ab-tests/analyze")
    def analyze(payload: dict[str, Any] = Body(...)):
        """Frequentist and Bayesian read-out; the first variant is the control."""
        results = ExperimentResults.model_validate(payload)
        return analyze_experiment(results).model_dump(mode="json", by_alias=True)

    return app


def run() -> None:
    """Serve the app with uvicorn using host/port from settings."""
    import uvicorn

    from .core.config import get_settings

    settings = get_settings()
    uvicorn.run(
        "pageforge.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
