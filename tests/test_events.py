from __future__ import annotations

import logging

from loudmeter.event_publisher import LoggingEventPublisher, NullEventPublisher
from loudmeter.events import GatingBlockAdded, MeasurementReset
from loudmeter.session import LoudnessMeterSession


def test_block_events_are_logged_at_debug_with_meter_fields(caplog) -> None:
    caplog.set_level(logging.DEBUG, logger="loudmeter.events")
    event = GatingBlockAdded(correlation_id="corr-1", payload_summary={"block_lufs": -23.0, "block_count": 1})

    LoggingEventPublisher().publish(event)

    record = caplog.records[-1]
    assert record.levelno == logging.DEBUG
    assert record.getMessage() == "GatingBlockAdded session=corr-1 block_count=1 block_lufs=-23.0"
    assert record.meter_event == "GatingBlockAdded"
    assert record.session_id == "corr-1"
    assert record.meter_block_lufs == -23.0
    assert record.meter_block_count == 1


def test_block_events_are_quiet_at_info(caplog) -> None:
    caplog.set_level(logging.INFO, logger="loudmeter.events")

    LoggingEventPublisher().publish(GatingBlockAdded(correlation_id="c", payload_summary={"block_count": 1}))

    assert caplog.records == []


def test_null_publisher_ignores_events() -> None:
    assert NullEventPublisher().publish(MeasurementReset(correlation_id="c", payload_summary={})) is None


def test_session_reset_is_logged_at_info(caplog) -> None:
    caplog.set_level(logging.INFO, logger="loudmeter.events")
    session = LoudnessMeterSession(event_publisher=LoggingEventPublisher(), session_id="sess-log")

    session.reset()

    assert [record.meter_event for record in caplog.records] == ["MeasurementReset"]
    assert caplog.records[0].levelno == logging.INFO
    assert caplog.records[0].session_id == "sess-log"
    assert caplog.records[0].meter_channel_count == 2
