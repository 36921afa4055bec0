# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Ordered, asynchronous delivery of execution events to subscribers."""

from __future__ import annotations

import logging
import queue
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Final

LOGGER = logging.getLogger(__name__)

_DEFAULT_FLUSH_TIMEOUT: Final[float] = 5.0


class EventType(StrEnum):
    """Enumerate the events emitted during an execution."""

    STARTED = "started"
    PROGRESS = "progress"
    OUTPUT = "output"
    COMPLETED = "completed"
    FAILED = "failed"
    TIMED_OUT = "timed_out"
    CANCELLED = "cancelled"


@dataclass(frozen=True, slots=True)
class LintingEvent:
    """Notification about one step of an execution."""

    type: EventType
    execution_id: str
    linter: str | None = None
    message: str | None = None
    stream: str | None = None
    timestamp: float = field(default_factory=time.time)


Subscriber = Callable[[LintingEvent], None]


class Subscription:
    """Handle returned by :meth:`EventChannel.subscribe`."""

    def __init__(self, channel: EventChannel, callback: Subscriber) -> None:
        self._channel = channel
        self.callback = callback

    def unsubscribe(self) -> None:
        """Stop delivering events to the callback."""

        self._channel.unsubscribe(self)

    def __enter__(self) -> Subscription:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.unsubscribe()


@dataclass(frozen=True, slots=True)
class _FlushMarker:
    done: threading.Event


class EventChannel:
    """Deliver events on a dedicated dispatcher thread in publication order.

    ``publish`` never blocks on subscribers, so pipe readers can forward output
    without stalling the child process. Subscribers registered when an event
    is dispatched receive it; callbacks that raise are logged and skipped.
    """

    def __init__(self) -> None:
        self._queue: queue.Queue[LintingEvent | _FlushMarker | None] = queue.Queue()
        self._subscribers: list[Subscription] = []
        self._lock = threading.Lock()
        self._thread: threading.Thread | None = None
        self._closed = False

    def subscribe(self, callback: Subscriber) -> Subscription:
        """Register ``callback`` and return its subscription handle."""

        subscription = Subscription(self, callback)
        with self._lock:
            self._subscribers.append(subscription)
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        """Remove ``subscription``; unknown handles are ignored."""

        with self._lock:
            if subscription in self._subscribers:
                self._subscribers.remove(subscription)

    def publish(self, event: LintingEvent) -> None:
        """Queue ``event`` for delivery."""

        with self._lock:
            if self._closed:
                return
            self._ensure_dispatcher()
        self._queue.put(event)

    def flush(self, timeout: float = _DEFAULT_FLUSH_TIMEOUT) -> bool:
        """Wait until every event published so far has been delivered.

        Returns:
            bool: ``True`` when delivery caught up within ``timeout`` seconds.
        """

        with self._lock:
            if self._thread is None or self._closed:
                return True
        marker = _FlushMarker(threading.Event())
        self._queue.put(marker)
        return marker.done.wait(timeout)

    def close(self, timeout: float = _DEFAULT_FLUSH_TIMEOUT) -> None:
        """Deliver pending events and stop the dispatcher thread."""

        with self._lock:
            if self._closed:
                return
            self._closed = True
            thread = self._thread
        if thread is None:
            return
        self._queue.put(None)
        thread.join(timeout)

    def _ensure_dispatcher(self) -> None:
        if self._thread is None:
            self._thread = threading.Thread(target=self._dispatch_loop, name="lintwise-events", daemon=True)
            self._thread.start()

    def _dispatch_loop(self) -> None:
        while True:
            item = self._queue.get()
            if item is None:
                return
            if isinstance(item, _FlushMarker):
                item.done.set()
                continue
            with self._lock:
                subscribers = list(self._subscribers)
            for subscription in subscribers:
                try:
                    subscription.callback(item)
                except Exception:  # noqa: BLE001 - a faulty subscriber must not stop delivery
                    LOGGER.exception("Event subscriber %r failed for %s", subscription.callback, item.type)


__all__ = ["EventChannel", "EventType", "LintingEvent", "Subscriber", "Subscription"]
