"""Periodic background tasks run on threads."""

from __future__ import annotations

import logging
import threading
from typing import Iterable, Protocol

logger = logging.getLogger(__name__)


class Task(Protocol):
    """A unit of periodic work."""

    def process(self) -> None:
        """Do the work once; may raise."""


class Worker:
    """Runs one task every ``interval`` seconds until stopped."""

    def __init__(self, task: Task, interval: float) -> None:
        self.task = task
        self.interval = interval

    def start(self, stop_event: threading.Event) -> None:
        """Loop until ``stop_event`` is set, running the task after each interval."""
        while not stop_event.wait(self.interval):
            try:
                self.task.process()
            except Exception:
                logger.exception("task process error")


class WorkerPool:
    """A set of workers started together."""

    def __init__(self, workers: Iterable[Worker]) -> None:
        self.workers = list(workers)

    def run(self, stop_event: threading.Event) -> list[threading.Thread]:
        """Start every worker on its own daemon thread and return the threads."""
        threads = []
        for worker in self.workers:
            thread = threading.Thread(target=worker.start, args=(stop_event,), daemon=True)
            thread.start()
            threads.append(thread)
        return threads