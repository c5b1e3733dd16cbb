"""Pages API client: fetch flat elements, PATCH flat elements back."""

from typing import Sequence

import httpx
import pybreaker
from pydantic import ValidationError as PydanticValidationError

from ..builder.elements import Element
from ..core.logging_config import get_logger
from .breaker import make_breaker

logger = get_logger(__name__)


class PagesClient:
    """
    Client for page element persistence with circuit breaker protection.

    Reads return an empty list and writes return False when the API is
    unavailable; callers keep their in-memory tree either way.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:3000",
        timeout: float = 5.0,
        fail_max: int = 5,
        reset_timeout: int = 30,
        client: httpx.Client | None = None,
    ) -> None:
        """
        Initialize pages client with circuit breaker.

        Args:
            base_url: Base URL of the web app exposing /api/pages
            timeout: Request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self._client = client or httpx.Client(timeout=timeout)
        self._breaker = make_breaker("pages-http", fail_max, reset_timeout)

        logger.info("client_init", url=self.base_url)

    def _page_url(self, page_id: str) -> str:
        return f"{self.base_url}/api/pages/{page_id}"

    def fetch_elements(self, page_id: str) -> list[Element]:
        """
        Load the persisted flat element list of a page.

        Returns:
            Flat elements (may carry dangling parents; build_element_tree copes)
        """

        def _make_request() -> httpx.Response:
            response = self._client.get(self._page_url(page_id))
            response.raise_for_status()
            return response

        try:
            data = self._breaker.call(_make_request).json()
        except pybreaker.CircuitBreakerError:
            logger.warning("pages_breaker_open", page_id=page_id)
            return []
        except httpx.HTTPError as e:
            logger.error("pages_fetch_failed", page_id=page_id, error=str(e))
            return []
        except Exception as e:
            logger.error("pages_unexpected_error", page_id=page_id, error=str(e), exc_info=True)
            return []

        raw = data.get("elements", []) if isinstance(data, dict) else data
        if not isinstance(raw, list):
            logger.error("invalid_response", type=type(raw).__name__)
            return []

        elements = []
        for item in raw:
            try:
                elements.append(Element.model_validate(item))
            except PydanticValidationError as e:
                logger.warning("element_skipped", error=str(e))
        return elements

    def save_elements(self, page_id: str, flat: Sequence[Element]) -> bool:
        """PATCH the flattened tree back; True on success."""
        payload = {
            "elements": [
                element.model_dump(mode="json", by_alias=True, exclude={"children"})
                for element in flat
            ]
        }

        def _make_request() -> httpx.Response:
            response = self._client.patch(self._page_url(page_id), json=payload)
            response.raise_for_status()
            return response

        try:
            self._breaker.call(_make_request)
        except pybreaker.CircuitBreakerError:
            logger.warning("pages_breaker_open", page_id=page_id)
            return False
        except httpx.HTTPError as e:
            logger.error("pages_save_failed", page_id=page_id, error=str(e))
            return False
        except Exception as e:
            logger.error("pages_unexpected_error", page_id=page_id, error=str(e), exc_info=True)
            return False

        logger.info("pages_saved", page_id=page_id, element_count=len(payload["elements"]))
        return True

    def close(self) -> None:
        """Close HTTP client."""
        self._client.close()

    def __enter__(self) -> "PagesClient":
        return self

    def __exit__(self, *args) -> None:
        self.close()
