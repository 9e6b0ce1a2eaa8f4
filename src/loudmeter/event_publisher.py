"""Event publishing for measurement sessions."""

from __future__ import annotations

import logging
from typing import Protocol

from loudmeter.events import GatingBlockAdded, LraBlockAdded, MeterEvent

LOGGER = logging.getLogger("loudmeter.events")

# Block events arrive every 400 ms per session.
_PER_BLOCK_EVENTS = (GatingBlockAdded, LraBlockAdded)


class EventPublisher(Protocol):
    def publish(self, event: MeterEvent) -> None:
        """Publish a single event."""


class NullEventPublisher:
    def publish(self, event: MeterEvent) -> None:  # noqa: ARG002
        return


class LoggingEventPublisher:
    """Log meter events on ``loudmeter.events``.

    Per-block events go out at DEBUG and session-level events at INFO. Each record
    carries ``meter_event``, ``session_id`` and the event's summary fields as
    ``meter_<key>`` attributes.
    """

    def publish(self, event: MeterEvent) -> None:
        level = logging.DEBUG if isinstance(event, _PER_BLOCK_EVENTS) else logging.INFO
        if not LOGGER.isEnabledFor(level):
            return

        name = type(event).__name__
        summary = " ".join(f"{key}={value}" for key, value in sorted(event.payload_summary.items()))
        extra = {f"meter_{key}": value for key, value in event.payload_summary.items()}
        extra.update(
            meter_event=name,
            session_id=event.correlation_id,
            occurred_at=event.occurred_at.isoformat(),
        )
        LOGGER.log(level, "%s session=%s %s", name, event.correlation_id, summary, extra=extra)
