"""
Task Queue - Single-threaded deferred work for automated turns.

An automated turn is two tasks on this queue: decide and apply a move
after the think-time, then (if a mill formed) take a piece after a
further think-time. Tasks run one at a time, in due-time order, on
whatever loop drives the queue. There is no cancellation.

Tasks are expected to handle their own failures; an exception raised
by a task propagates out of the run method that executed it.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable
import asyncio
import heapq
import itertools
import time

from loguru import logger


@dataclass(order=True)
class ScheduledTask:
    """A callback waiting on the queue."""
    due: float
    sequence: int
    callback: Callable[[], None] = field(compare=False)
    name: str = field(default="", compare=False)


class TaskQueue:
    """
    Deferred tasks ordered by due time, then by scheduling order.

    Usage:
        queue = TaskQueue()
        queue.schedule(0.5, do_something, name="decide")

        # Either poll from an existing loop...
        queue.run_due()

        # ...or let asyncio wait for each task
        await queue.run_until_idle()
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._heap: list[ScheduledTask] = []
        self._counter = itertools.count()

    def __len__(self) -> int:
        return len(self._heap)

    @property
    def pending(self) -> list[str]:
        """Names of waiting tasks, in run order."""
        return [task.name for task in sorted(self._heap)]

    @property
    def next_due(self) -> float | None:
        return self._heap[0].due if self._heap else None

    def schedule(self, delay: float, callback: Callable[[], None], name: str = "") -> ScheduledTask:
        """Queue a callback to run once delay seconds have passed."""
        task = ScheduledTask(
            due=self._clock() + max(0.0, delay),
            sequence=next(self._counter),
            callback=callback,
            name=name,
        )
        heapq.heappush(self._heap, task)
        logger.debug("Scheduled task {!r} in {:.2f}s", name, delay)
        return task

    def run_due(self) -> int:
        """
        Run every task whose due time has passed.

        Tasks scheduled while running are included if they are
        already due. Returns the number of tasks run.
        """
        ran = 0
        while self._heap and self._heap[0].due <= self._clock():
            self._run(heapq.heappop(self._heap))
            ran += 1
        return ran

    def run_all(self, limit: int | None = None) -> int:
        """
        Run tasks in order without waiting for their due times.

        Keeps going until the queue is empty or limit tasks have run.
        Returns the number of tasks run.
        """
        ran = 0
        while self._heap and (limit is None or ran < limit):
            self._run(heapq.heappop(self._heap))
            ran += 1
        return ran

    async def run_until_idle(self):
        """Sleep until each task is due and run it, until the queue is empty."""
        while self._heap:
            wait = self._heap[0].due - self._clock()
            if wait > 0:
                await asyncio.sleep(wait)
            self.run_due()

    def _run(self, task: ScheduledTask):
        logger.debug("Running task {!r}", task.name)
        task.callback()
