"""
Debounced, batched activity logging.

``record`` only queues. A flush sends everything queued so far in one insert
once ``delay`` seconds pass without a new record. Failed inserts are logged
and the batch is dropped: activity logging never blocks or fails the action
that produced it.

The flush trigger is explicit. Call ``flush_if_due`` from a loop with an
injected clock, or pass a ``timer_factory`` (``threading.Timer``) to have a
background timer call ``flush`` for you.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Optional, Protocol

from temerio.client.api import TemerioApiClient
from temerio.db import ActivityEventRecord, DbClient

logger = logging.getLogger(__name__)

DEFAULT_FLUSH_DELAY = 1.0


class ActivitySink(Protocol):
    def __call__(self, events: list[dict]) -> None:
        ...


class ActivityFlushError(Exception):
    pass


class ApiActivitySink:
    """Posts batches to the service's activity endpoint."""

    def __init__(self, api: TemerioApiClient):
        self.api = api

    def __call__(self, events: list[dict]) -> None:
        body = {
            "events": [
                {k: v for k, v in event.items() if k != "actor_id"} for event in events
            ]
        }
        result = self.api.invoke("activity-events", body)
        if result.error is not None:
            raise ActivityFlushError(f"{result.status}: {result.error}")


class DbActivitySink:
    """Writes batches straight to the store."""

    def __init__(self, db: DbClient):
        self.db = db

    def __call__(self, events: list[dict]) -> None:
        self.db.insert_activity_events([ActivityEventRecord(**event) for event in events])


class ActivityLogger:
    def __init__(
        self,
        sink: ActivitySink,
        actor_id: Optional[str] = None,
        *,
        delay: float = DEFAULT_FLUSH_DELAY,
        clock: Callable[[], float] = time.monotonic,
        timer_factory: Optional[Callable[..., threading.Timer]] = None,
    ):
        self.actor_id = actor_id
        self._sink = sink
        self._delay = delay
        self._clock = clock
        self._timer_factory = timer_factory
        self._lock = threading.Lock()
        self._queue: list[dict] = []
        self._deadline: Optional[float] = None
        self._timer = None

    @property
    def pending(self) -> int:
        with self._lock:
            return len(self._queue)

    def record(
        self,
        action: str,
        item_type: str,
        item_id: Optional[str] = None,
        metadata: Optional[dict] = None,
    ) -> None:
        if not self.actor_id:
            return

        with self._lock:
            self._queue.append(
                {
                    "actor_id": self.actor_id,
                    "action": action,
                    "item_type": item_type,
                    "item_id": item_id,
                    "metadata": metadata or {},
                }
            )
            self._deadline = self._clock() + self._delay
            if self._timer_factory is not None:
                if self._timer is not None:
                    self._timer.cancel()
                self._timer = self._timer_factory(self._delay, self.flush)
                self._timer.daemon = True
                self._timer.start()

    def flush_if_due(self) -> int:
        with self._lock:
            due = self._deadline is not None and self._clock() >= self._deadline
        return self.flush() if due else 0

    def flush(self) -> int:
        """Send everything queued now. Returns the number of events inserted."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            batch, self._queue = self._queue, []
            self._deadline = None

        if not batch:
            return 0
        try:
            self._sink(batch)
        except Exception as exc:
            logger.error("Failed to log activity (%d events dropped): %s", len(batch), exc)
            return 0
        return len(batch)

    def close(self) -> None:
        self.flush()
