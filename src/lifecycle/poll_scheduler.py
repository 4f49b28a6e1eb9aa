"""
Poll Scheduler
--------------

Single background thread running periodic jobs at a fixed rate. One
scheduler is owned by each Beagle and shared by all of its change
notifiers; pin managers never own threads.

Features:
- schedule(callback, interval) / cancel(job)
- fixed-rate timing on the monotonic clock (no catch-up bursts after a stall)
- a failing job is logged and keeps its schedule
- lazy thread start, idempotent shutdown
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from models.enums import LogCategory
from utils.logger import get_logger

log = get_logger().for_category(LogCategory.POLL)


@dataclass
class ScheduledJob:
    """Handle returned by PollScheduler.schedule()"""
    id: int
    name: str
    interval: float
    callback: Callable[[], None]
    next_run: float
    cancelled: bool = False
    runs: int = 0
    failures: int = 0


class PollScheduler:
    """
    Fixed-rate scheduler backed by one daemon thread

    Example:
        scheduler = PollScheduler()
        job = scheduler.schedule(sample_pin, interval=0.01, name="P8_04")
        ...
        scheduler.cancel(job)
        scheduler.shutdown()
    """

    def __init__(self, name: str = "GpioPollScheduler"):
        self.name = name
        self._cond = threading.Condition()
        self._jobs: Dict[int, ScheduledJob] = {}
        self._next_id = 1
        self._thread: Optional[threading.Thread] = None
        self._shutdown = False

    # -----------------------------
    # Public API
    # -----------------------------

    def schedule(
        self,
        callback: Callable[[], None],
        interval: float,
        name: str = "",
        initial_delay: Optional[float] = None
    ) -> ScheduledJob:
        """
        Run callback every `interval` seconds on the scheduler thread.

        Args:
            callback: Zero-argument callable
            interval: Period in seconds (> 0)
            name: Label used in logs
            initial_delay: Delay before the first run (default: one interval)

        Raises:
            ValueError: If interval is not positive
            RuntimeError: If the scheduler was shut down
        """
        if interval <= 0:
            raise ValueError(f"interval must be > 0, got {interval}")

        with self._cond:
            if self._shutdown:
                raise RuntimeError(f"{self.name} is shut down")

            delay = interval if initial_delay is None else initial_delay
            job = ScheduledJob(
                id=self._next_id,
                name=name or f"job-{self._next_id}",
                interval=interval,
                callback=callback,
                next_run=time.monotonic() + delay,
            )
            self._next_id += 1
            self._jobs[job.id] = job
            self._ensure_started()
            self._cond.notify()

        log.debug("Job scheduled", job=job.name, interval_ms=round(interval * 1000, 1))
        return job

    def cancel(self, job: ScheduledJob) -> None:
        """Stop a job. A run already in progress completes."""
        with self._cond:
            job.cancelled = True
            removed = self._jobs.pop(job.id, None)
            self._cond.notify()

        if removed is not None:
            log.debug("Job cancelled", job=job.name, runs=job.runs)

    def shutdown(self, timeout: float = 2.0) -> None:
        """Cancel all jobs and stop the thread (idempotent)."""
        with self._cond:
            if self._shutdown:
                return
            self._shutdown = True
            for job in self._jobs.values():
                job.cancelled = True
            self._jobs.clear()
            self._cond.notify_all()

        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=timeout)
            if thread.is_alive():
                log.warn("Scheduler thread did not stop in time", timeout=timeout)

        log.debug("Poll scheduler shut down", name=self.name)

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def is_shutdown(self) -> bool:
        return self._shutdown

    def jobs(self) -> List[ScheduledJob]:
        """Snapshot of the active jobs."""
        with self._cond:
            return list(self._jobs.values())

    # -----------------------------
    # Internals
    # -----------------------------

    def _ensure_started(self) -> None:
        # Caller holds self._cond
        if self._thread and self._thread.is_alive():
            return

        self._thread = threading.Thread(
            target=self._run,
            daemon=True,
            name=self.name
        )
        self._thread.start()

    def _collect_due(self) -> Optional[List[ScheduledJob]]:
        """Wait until at least one job is due; None means shut down."""
        with self._cond:
            while True:
                if self._shutdown:
                    return None

                now = time.monotonic()
                due = [job for job in self._jobs.values() if job.next_run <= now]
                if due:
                    for job in due:
                        job.next_run += job.interval
                        if job.next_run <= now:
                            # Stalled for more than one period, skip missed runs
                            job.next_run = now + job.interval
                    return due

                timeout = None
                if self._jobs:
                    timeout = min(job.next_run for job in self._jobs.values()) - now
                self._cond.wait(timeout)

    def _run(self) -> None:
        while True:
            due = self._collect_due()
            if due is None:
                return

            for job in due:
                if job.cancelled:
                    continue
                try:
                    job.callback()
                    job.runs += 1
                except Exception as ex:
                    job.failures += 1
                    log.exception("Scheduled job failed", ex, job=job.name)
