"""Detached work for the HTTP layer."""

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable

logger = logging.getLogger(__name__)


class BackgroundTasks:
    """Single-worker executor for classification runs started by a request.

    One worker keeps detached classifier calls strictly sequential, so the
    pacing between calls still holds. Errors are logged, never re-raised.
    """

    def __init__(self) -> None:
        self.executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="analysis")

    def submit(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Future:
        name = getattr(fn, "__name__", repr(fn))
        future = self.executor.submit(fn, *args, **kwargs)
        future.add_done_callback(lambda f: self._log_outcome(name, f))
        return future

    @staticmethod
    def _log_outcome(name: str, future: Future) -> None:
        if future.cancelled():
            logger.warning("Background task %s was cancelled", name)
            return
        error = future.exception()
        if error is not None:
            logger.error("Background task %s failed: %s", name, error)
        else:
            logger.debug("Background task %s finished: %s", name, future.result())

    def shutdown(self, wait: bool = True) -> None:
        self.executor.shutdown(wait=wait)
