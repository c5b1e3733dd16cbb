"""
Best-effort analytics tracking.

Events are queued and POSTed in batches. Delivery failures are logged and the
events re-queued; nothing here ever raises into the caller's flow.
"""

import time
from enum import Enum
from typing import Any, Callable

import httpx
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..core.config import Settings
from ..core.id import generate_prefixed
from ..core.logging_config import get_logger

logger = get_logger(__name__)

SCROLL_MILESTONES = (25, 50, 75, 100)


class EventType(str, Enum):
    PAGE_VIEW = "PAGE_VIEW"
    CLICK = "CLICK"
    FORM_SUBMIT = "FORM_SUBMIT"
    SCROLL = "SCROLL"
    TIME_ON_PAGE = "TIME_ON_PAGE"
    CONVERSION = "CONVERSION"
    CUSTOM = "CUSTOM"


class _Camel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)


class TrackingEvent(_Camel):
    event_type: EventType
    event_name: str
    session_id: str
    visitor_id: str | None = None
    variant_id: str | None = None
    event_data: dict[str, Any] | None = None
    element_id: str | None = None
    element_type: str | None = None
    element_text: str | None = None
    scroll_depth: int | None = None
    is_conversion: bool | None = None
    conversion_value: float | None = None
    timestamp: int | None = None


class TrackerConfig(_Camel):
    session_id: str
    workspace_slug: str
    page_id: str
    visitor_id: str | None = None
    variant_id: str | None = None
    base_url: str = ""
    api_endpoint: str = "/api/analytics/track"
    batch_size: int = Field(default=10, gt=0)
    batch_interval: float = Field(default=5.0, gt=0, description="Seconds between flushes")
    max_queue_size: int = Field(default=1000, gt=0)

    @classmethod
    def from_settings(cls, settings: Settings, **fields: Any) -> "TrackerConfig":
        """Endpoint and batching from settings; session and page fields from the caller."""
        fields.setdefault("base_url", settings.pages_api_url)
        return cls(
            api_endpoint=settings.analytics_endpoint,
            batch_size=settings.analytics_batch_size,
            batch_interval=settings.analytics_batch_interval,
            **fields,
        )


class AnalyticsTracker:
    """
    Batching event tracker.

    A flush happens when the queue reaches ``batch_size`` or when an event is
    tracked more than ``batch_interval`` seconds after the last flush.
    """

    def __init__(
        self,
        config: TrackerConfig,
        client: httpx.Client | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.config = config
        self._owns_client = client is None
        self._client = client or httpx.Client(base_url=config.base_url, timeout=5.0)
        self._clock = clock
        self._queue: list[TrackingEvent] = []
        self._last_flush = clock()
        self._started = clock()
        self._milestones_hit: set[int] = set()

    @property
    def pending(self) -> list[TrackingEvent]:
        return list(self._queue)

    def _event(self, event_type: EventType, event_name: str, **fields: Any) -> TrackingEvent:
        return TrackingEvent(
            event_type=event_type,
            event_name=event_name,
            session_id=self.config.session_id,
            visitor_id=self.config.visitor_id,
            variant_id=self.config.variant_id,
            **fields,
        )

    def track(self, event: TrackingEvent) -> None:
        """Queue an event (timestamped now) and flush if a batch is due."""
        self._queue.append(event.model_copy(update={"timestamp": int(time.time() * 1000)}))
        self._trim_queue()

        if len(self._queue) >= self.config.batch_size:
            self.flush()
        elif self._clock() - self._last_flush >= self.config.batch_interval:
            self.flush()

    def track_page_view(
        self, page_name: str | None = None, url: str | None = None, referrer: str | None = None
    ) -> None:
        self.track(
            self._event(
                EventType.PAGE_VIEW,
                page_name or "page_view",
                event_data={"url": url, "referrer": referrer},
            )
        )

    def track_click(
        self, element_id: str | None, element_type: str, element_text: str | None = None
    ) -> None:
        text = element_text.strip()[:100] if element_text else None
        self.track(
            self._event(
                EventType.CLICK,
                "element_click",
                element_id=element_id,
                element_type=element_type,
                element_text=text or None,
            )
        )

    def track_form_submit(self, form_id: str | None = None) -> None:
        self.track(
            self._event(EventType.FORM_SUBMIT, "form_submission", element_id=form_id, element_type="form")
        )

    def track_scroll(self, scroll_depth: int) -> bool:
        """Record a scroll milestone (25/50/75/100); each fires once. Returns True if tracked."""
        milestone = (min(max(scroll_depth, 0), 100) // 25) * 25
        if milestone not in SCROLL_MILESTONES or milestone in self._milestones_hit:
            return False
        self._milestones_hit.add(milestone)
        self.track(self._event(EventType.SCROLL, "scroll_depth", scroll_depth=milestone))
        return True

    def track_time_on_page(self) -> None:
        duration = int(self._clock() - self._started)
        self.track(
            self._event(EventType.TIME_ON_PAGE, "session_duration", event_data={"duration": duration})
        )

    def track_conversion(
        self, event_name: str, value: float | None = None, data: dict[str, Any] | None = None
    ) -> None:
        self.track(
            self._event(
                EventType.CONVERSION,
                event_name,
                is_conversion=True,
                conversion_value=value,
                event_data=data,
            )
        )

    def track_custom(self, event_name: str, data: dict[str, Any] | None = None) -> None:
        self.track(self._event(EventType.CUSTOM, event_name, event_data=data))

    def _trim_queue(self) -> None:
        overflow = len(self._queue) - self.config.max_queue_size
        if overflow > 0:
            del self._queue[:overflow]
            logger.warning("analytics_events_dropped", count=overflow)

    def flush(self) -> bool:
        """
        Send queued events in one request.

        Returns:
            True if the batch was delivered (or there was nothing to send)
        """
        self._last_flush = self._clock()
        if not self._queue:
            return True

        events, self._queue = self._queue, []
        payload = {
            "events": [e.model_dump(mode="json", by_alias=True, exclude_none=True) for e in events],
            "workspaceSlug": self.config.workspace_slug,
            "pageId": self.config.page_id,
        }

        try:
            response = self._client.post(self.config.api_endpoint, json=payload)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning("analytics_flush_failed", error=str(e), events=len(events))
            self._queue = events + self._queue
            self._trim_queue()
            return False
        except Exception as e:
            logger.error("analytics_flush_error", error=str(e), events=len(events), exc_info=True)
            self._queue = events + self._queue
            self._trim_queue()
            return False

        logger.debug("analytics_flushed", events=len(events))
        return True

    def close(self) -> None:
        """Final flush, then release the HTTP client if this tracker created it."""
        self.track_time_on_page()
        self.flush()
        if self._owns_client:
            self._client.close()


def generate_session_id() -> str:
    return generate_prefixed("session")
