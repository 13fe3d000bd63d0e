# course_chat/infrastructure/tasks/background_executor.py
from __future__ import annotations

import contextvars
import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Any, Callable

from course_chat.config.settings import settings

logger = logging.getLogger(__name__)


class BackgroundExecutor:
    """Bounded pool for fire-and-forget work.

    Callers get nothing back from ``submit``. Every task runs inside a copy of
    the submitting thread's ``contextvars`` context and its outcome and
    duration are logged.
    """

    def __init__(self, *, max_workers: int, name: str = "chat-async") -> None:
        self._name = name
        self._pool = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix=name)
        self._pending: set[Future] = set()
        self._lock = threading.Lock()

    def submit(self, fn: Callable[..., Any], *args: Any, label: str | None = None, **kwargs: Any) -> None:
        task_label = label or getattr(fn, "__name__", "task")
        ctx = contextvars.copy_context()
        started = time.monotonic()

        future = self._pool.submit(ctx.run, fn, *args, **kwargs)
        with self._lock:
            self._pending.add(future)

        def _done(f: Future) -> None:
            with self._lock:
                self._pending.discard(f)
            elapsed_ms = (time.monotonic() - started) * 1000
            exc = f.exception()
            if exc is not None:
                logger.error(
                    "Background task %s failed after %.1f ms",
                    task_label,
                    elapsed_ms,
                    exc_info=(type(exc), exc, exc.__traceback__),
                )
            else:
                logger.info("Background task %s finished in %.1f ms", task_label, elapsed_ms)

        future.add_done_callback(_done)

    @property
    def pending_count(self) -> int:
        with self._lock:
            return len(self._pending)

    def wait_idle(self, timeout: float | None = None) -> bool:
        """Block until every submitted task finished. Returns False on timeout."""
        with self._lock:
            pending = list(self._pending)
        if not pending:
            return True
        _, not_done = wait(pending, timeout=timeout)
        return not not_done

    def shutdown(self, wait: bool = True) -> None:
        self._pool.shutdown(wait=wait)


background_executor = BackgroundExecutor(max_workers=settings.async_max_workers)
