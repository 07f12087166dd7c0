"""
Background job coordinator.

Runs jobs off the dispatcher thread and hands each result message to a
sink. The sink is the only way back into the dispatcher: in the app it
posts onto the UI thread, in tests it is usually ``queue.Queue.put``.

The app plugs in Textual's thread workers and timers through ``runner``
and ``scheduler``. Without them jobs run on a small thread pool and
delays on ``threading.Timer``.
"""

from __future__ import annotations

import logging
import queue
import threading
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from typing import Callable, Iterable

from lazyarchon.jobs import Delay, Job, Services
from lazyarchon.messages import JobCrashed, Message
from lazyarchon.providers import PushEvent

logger = logging.getLogger(__name__)

Sink = Callable[[Message], None]
# Runs ``work`` on some thread; ``group`` names the kind of job.
Runner = Callable[[Callable[[], None], str], object]
# Delivers ``message`` after ``seconds``.
Scheduler = Callable[[float, Message], object]

DEFAULT_WORKERS = 4


def job_group(job: Job) -> str:
    """Worker group name for ``job``: ``LoadTasks`` becomes ``load-tasks``."""
    name = type(job).__name__
    return "".join(f"-{c.lower()}" if c.isupper() else c for c in name).lstrip("-")


class JobCoordinator:
    """Executes jobs off the dispatcher thread.

    Every submitted job yields exactly one message through ``sink``, unless
    the coordinator was shut down before the job finished.
    """

    def __init__(
        self,
        services: Services,
        sink: Sink,
        max_workers: int = DEFAULT_WORKERS,
        scheduler: Scheduler | None = None,
        runner: Runner | None = None,
    ) -> None:
        self._services = services
        self._sink = sink
        self._executor: ThreadPoolExecutor | None = None
        if runner is None:
            self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="lazyarchon-job")
            runner = self._run_on_pool
        self._runner = runner
        self._scheduler = scheduler or self._start_timer
        self._timers: set[threading.Timer] = set()
        self._lock = threading.Lock()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def submit(self, job: Job) -> None:
        if self._closed:
            logger.debug("Dropped %s after shutdown", type(job).__name__)
            return
        if isinstance(job, Delay):
            self._scheduler(job.seconds, job.message)
            return
        self._runner(partial(self._execute, job), job_group(job))

    def submit_all(self, jobs: Iterable[Job]) -> None:
        for job in jobs:
            self.submit(job)

    def _execute(self, job: Job) -> None:
        try:
            message = job.run(self._services)
        except Exception as e:
            logger.exception("Job %s crashed", type(job).__name__)
            message = JobCrashed(
                type(job).__name__, str(e), job.tracks_loading, getattr(job, "generation", None)
            )
        self._deliver(message)

    def _deliver(self, message: Message) -> None:
        if self._closed:
            return
        self._sink(message)

    def _run_on_pool(self, work: Callable[[], None], group: str) -> None:
        self._executor.submit(work)

    def _start_timer(self, seconds: float, message: Message) -> threading.Timer:
        def fire() -> None:
            with self._lock:
                self._timers.discard(timer)
            self._deliver(message)

        timer = threading.Timer(seconds, fire)
        timer.daemon = True
        with self._lock:
            self._timers.add(timer)
        timer.start()
        return timer

    def shutdown(self, wait: bool = False) -> None:
        """Stop accepting jobs, cancel pending timers and drop late results."""
        self._closed = True
        with self._lock:
            timers = list(self._timers)
            self._timers.clear()
        for timer in timers:
            timer.cancel()
        if self._executor is not None:
            self._executor.shutdown(wait=wait, cancel_futures=True)


class QueuePushSource:
    """Push source fed by any producer thread through ``publish``."""

    def __init__(self) -> None:
        self._queue: queue.Queue[PushEvent] = queue.Queue()

    def publish(self, event: PushEvent) -> None:
        self._queue.put(event)

    def receive(self, timeout: float | None = None) -> PushEvent | None:
        try:
            return self._queue.get(timeout=timeout)
        except queue.Empty:
            return None
