"""Domain events emitted while a loudness measurement session runs."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


@dataclass(frozen=True, slots=True)
class MeterEvent:
    """Base event emitted by a measurement session."""

    correlation_id: str
    payload_summary: dict[str, Any]
    occurred_at: datetime = field(default_factory=lambda: datetime.now(tz=timezone.utc))


@dataclass(frozen=True, slots=True)
class GatingBlockAdded(MeterEvent):
    """A 400 ms block was added to the integrated loudness gate."""


@dataclass(frozen=True, slots=True)
class LraBlockAdded(MeterEvent):
    """A short-term loudness value was added to the loudness range histogram."""


@dataclass(frozen=True, slots=True)
class MeasurementReset(MeterEvent):
    """Integrated loudness and loudness range were cleared."""
