"""Dispatcher for best-effort side effects with retry and backoff."""

from __future__ import annotations

import time
from concurrent.futures import ThreadPoolExecutor

import redis
from flask import current_app
from rq import Queue, Retry

from reefmag.services.jobs import JOBS, run_job


class TaskQueue:
    """Runs fire-and-forget jobs outside the request/response cycle.

    With REDIS_URL configured jobs go to an RQ queue served by
    ``reefmag.worker``. Otherwise they run on a small in-process thread pool,
    or synchronously when TASKS_EAGER is set. Failures are logged and never
    reach the caller.
    """

    queue_name = 'best_effort'

    def __init__(self, app):
        self.app = app
        self.retries = app.config.get('TASK_RETRIES', 3)
        self.backoff = app.config.get('TASK_BACKOFF_SECONDS', 2.0)
        self.eager = app.config.get('TASKS_EAGER', False)
        self._queue = None
        self._executor = None

        redis_url = app.config.get('REDIS_URL')
        if redis_url and not self.eager:
            self._queue = Queue(self.queue_name, connection=redis.from_url(redis_url))
        elif not self.eager:
            self._executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix='reefmag-task')

    def _retry_intervals(self) -> list[int]:
        return [max(1, int(self.backoff * 2 ** attempt)) for attempt in range(self.retries)]

    def submit(self, name: str, *args) -> None:
        if name not in JOBS:
            raise KeyError(f"Unknown job {name}")

        if self._queue is not None:
            try:
                self._queue.enqueue(
                    run_job, name, *args,
                    retry=Retry(max=self.retries, interval=self._retry_intervals()),
                )
            except Exception as e:
                self.app.logger.error(f"Could not enqueue job {name}: {e}")
            return

        if self._executor is not None:
            self._executor.submit(self._run, name, args)
        else:
            self._run(name, args)

    def _run(self, name: str, args: tuple) -> bool:
        job = JOBS[name]
        attempts = self.retries + 1
        with self.app.app_context():
            for attempt in range(attempts):
                try:
                    job(*args)
                    return True
                except Exception as e:
                    self.app.logger.warning(f"Job {name} attempt {attempt + 1}/{attempts} failed: {e}")
                    if attempt + 1 < attempts and self.backoff:
                        time.sleep(self.backoff * 2 ** attempt)
            self.app.logger.error(f"Job {name} gave up after {attempts} attempts")
            return False

    def shutdown(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=True)


def get_task_queue() -> TaskQueue:
    return current_app.extensions['reefmag']['tasks']


__all__ = ['TaskQueue', 'get_task_queue']
