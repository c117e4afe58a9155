"""
Reporting client capability.

The rate limiter forwards admitted observations through this interface and
never depends on a concrete transport.
"""

import logging
import threading
from abc import ABC, abstractmethod
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Optional

from healthgate.health.models import Metric, ReportResult

logger = logging.getLogger(__name__)

ReportCallback = Callable[[Optional[ReportResult], Optional[BaseException]], None]


class ReportError(Exception):
    """Raised when a report cannot be delivered."""
    pass


class ReportingClient(ABC):
    """
    Base class for clients delivering health reports.

    Subclasses implement `report`; `report_async` runs it on a small worker
    pool and hands the outcome to an optional callback. The pool is created
    on first use, so subclasses need not call `super().__init__()`.
    """

    max_workers = 4
    _executor: Optional[ThreadPoolExecutor] = None
    _executor_lock = threading.Lock()

    def __init__(self, max_workers: int = 4):
        self.max_workers = max_workers

    def _get_executor(self) -> ThreadPoolExecutor:
        with self._executor_lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self.max_workers,
                    thread_name_prefix=type(self).__name__,
                )
            return self._executor

    @abstractmethod
    def report(self, subject: str, metric: Metric) -> ReportResult:
        """
        Deliver a single metric about `subject`, blocking until done.

        Args:
            subject: Entity the metric is about
            metric: Metric to deliver

        Returns:
            Result reported by the receiving storage

        Raises:
            ReportError: If the report could not be delivered
        """
        pass

    def report_async(
        self,
        callback: Optional[ReportCallback],
        subject: str,
        metric: Metric,
    ) -> "Future[ReportResult]":
        """
        Deliver a metric in the background.

        Args:
            callback: Called as callback(result, None) on success or
                callback(None, error) on failure; if None, failures are logged
            subject: Entity the metric is about
            metric: Metric to deliver

        Returns:
            Future resolving to the report result
        """
        future = self._get_executor().submit(self.report, subject, metric)

        def _done(f: "Future[ReportResult]") -> None:
            error = f.exception()
            if callback is not None:
                callback(None if error else f.result(), error)
            elif error is not None:
                logger.error(f"Async report for {subject} ({metric.name}) failed: {error}")

        future.add_done_callback(_done)
        return future

    def close(self) -> None:
        """Wait for pending asynchronous reports and release resources."""
        with self._executor_lock:
            executor = self._executor
        if executor is not None:
            executor.shutdown(wait=True)

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
