"""Client-side style analytics tracking."""

from .tracker import (
    SCROLL_MILESTONES,
    AnalyticsTracker,
    EventType,
    TrackerConfig,
    TrackingEvent,
    generate_session_id,
)

__all__ = [
    "SCROLL_MILESTONES",
    "AnalyticsTracker",
    "EventType",
    "TrackerConfig",
    "TrackingEvent",
    "generate_session_id",
]
