"""Design inspiration search (SerpAPI), key-gated and best-effort."""

from dataclasses import dataclass

import httpx
import pybreaker

from ..core.logging_config import get_logger
from .breaker import make_breaker

logger = get_logger(__name__)

SERP_API_URL = "https://serpapi.com/search"


@dataclass(frozen=True)
class InspirationResult:
    """One web search hit."""

    title: str
    snippet: str
    url: str


class InspirationSearchClient:
    """
    Web search for real-world page examples.

    Without an API key every search returns an empty list. Failures are
    logged and also return an empty list; repeated failures open the
    circuit breaker so the search is skipped for a while.
    """

    def __init__(
        self,
        api_key: str | None = None,
        timeout: float = 5.0,
        max_results: int = 5,
        fail_max: int = 5,
        reset_timeout: int = 30,
        client: httpx.Client | None = None,
    ) -> None:
        self.api_key = api_key or None
        self.max_results = max_results
        self._client = client or httpx.Client(timeout=timeout)
        self._breaker = make_breaker("inspiration-search", fail_max, reset_timeout)

    @property
    def enabled(self) -> bool:
        return self.api_key is not None

    def search(self, query: str) -> list[InspirationResult]:
        """
        Search the web for ``query``.

        Returns:
            Up to ``max_results`` hits, or an empty list when disabled or failing
        """
        if not self.enabled:
            return []

        def _make_request() -> httpx.Response:
            response = self._client.get(
                SERP_API_URL,
                params={"q": query, "api_key": self.api_key, "num": self.max_results},
            )
            response.raise_for_status()
            return response

        try:
            data = self._breaker.call(_make_request).json()
        except pybreaker.CircuitBreakerError:
            logger.warning("search_breaker_open", query=query)
            return []
        except httpx.HTTPError as e:
            logger.error("search_failed", query=query, error=str(e))
            return []
        except Exception as e:
            logger.error("search_unexpected_error", query=query, error=str(e), exc_info=True)
            return []

        results = data.get("organic_results", []) if isinstance(data, dict) else []
        return [
            InspirationResult(
                title=item.get("title", ""),
                snippet=item.get("snippet", ""),
                url=item.get("link", ""),
            )
            for item in results[: self.max_results]
        ]

    def close(self) -> None:
        self._client.close()
