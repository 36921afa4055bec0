# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for ordered event delivery."""

from __future__ import annotations

import threading

from lintwise.execution import EventChannel, LintingEvent
from lintwise.execution.events import EventType


def _event(index: int) -> LintingEvent:
    return LintingEvent(EventType.OUTPUT, "exec", message=str(index))


def test_events_arrive_in_publication_order() -> None:
    channel = EventChannel()
    received: list[str] = []
    channel.subscribe(lambda event: received.append(event.message))

    for index in range(200):
        channel.publish(_event(index))

    assert channel.flush()
    assert received == [str(index) for index in range(200)]
    channel.close()


def test_publish_does_not_block_on_slow_subscribers() -> None:
    channel = EventChannel()
    gate = threading.Event()
    received: list[str] = []

    def slow(event: LintingEvent) -> None:
        gate.wait(5)
        received.append(event.message)

    channel.subscribe(slow)
    for index in range(5):
        channel.publish(_event(index))

    assert received == []
    gate.set()
    assert channel.flush()
    assert received == ["0", "1", "2", "3", "4"]
    channel.close()


def test_failing_subscriber_does_not_stop_delivery(caplog) -> None:
    channel = EventChannel()
    received: list[str] = []

    def broken(event: LintingEvent) -> None:
        raise RuntimeError("boom")

    channel.subscribe(broken)
    channel.subscribe(lambda event: received.append(event.message))
    channel.publish(_event(1))
    channel.publish(_event(2))

    assert channel.flush()
    assert received == ["1", "2"]
    assert "boom" in caplog.text
    channel.close()


def test_unsubscribe_stops_delivery() -> None:
    channel = EventChannel()
    received: list[str] = []

    with channel.subscribe(lambda event: received.append(event.message)):
        channel.publish(_event(1))
        assert channel.flush()
    channel.publish(_event(2))

    assert channel.flush()
    assert received == ["1"]
    channel.close()


def test_closed_channel_drops_events() -> None:
    channel = EventChannel()
    received: list[str] = []
    channel.subscribe(lambda event: received.append(event.message))
    channel.publish(_event(1))
    channel.close()

    channel.publish(_event(2))

    assert received == ["1"]
    assert channel.flush()
