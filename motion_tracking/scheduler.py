# scheduler.py
"""Tick schedulers: "run this callback on the next display refresh"."""
from __future__ import annotations

import itertools
import threading
from collections import OrderedDict
from typing import Callable, Optional

import cv2

Callback = Callable[[], None]


class Scheduler:
    """Base class. A handle identifies one pending tick request."""

    def __init__(self) -> None:
        self._pending: "OrderedDict[int, Callback]" = OrderedDict()
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def request_tick(self, callback: Callback) -> int:
        with self._lock:
            handle = next(self._ids)
            self._pending[handle] = callback
        return handle

    def cancel(self, handle: Optional[int]) -> None:
        if handle is None:
            return
        with self._lock:
            self._pending.pop(handle, None)

    @property
    def pending(self) -> int:
        return len(self._pending)

    def _take_due(self) -> list:
        # Callbacks requested during this tick run on the next one
        with self._lock:
            due = list(self._pending.values())
            self._pending.clear()
        return due

    def step(self) -> int:
        """Run every callback due on this tick; return how many ran."""
        due = self._take_due()
        for callback in due:
            callback()
        return len(due)


class ManualScheduler(Scheduler):
    """Deterministic scheduler for tests: nothing happens until stepped."""

    def run(self, ticks: int) -> int:
        ran = 0
        for _ in range(ticks):
            ran += self.step()
        return ran


class DisplayScheduler(Scheduler):
    """
    Blocking loop paced by the OpenCV window: each iteration runs the due
    callbacks, then pumps ``cv2.waitKey`` so the window repaints.
    ``on_key`` gets every key code; returning False ends :meth:`run`.
    """

    def __init__(self, on_key: Optional[Callable[[int], bool]] = None, wait_ms: int = 1) -> None:
        super().__init__()
        self.on_key = on_key
        self.wait_ms = wait_ms
        self._running = False

    def stop(self) -> None:
        self._running = False

    def run(self) -> None:
        self._running = True
        while self._running:
            self.step()
            key = cv2.waitKey(self.wait_ms) & 0xFF
            if key != 0xFF and self.on_key is not None and not self.on_key(key):
                break
            if not self._pending and not self.on_key:
                break
        self._running = False
