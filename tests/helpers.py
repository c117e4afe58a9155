"""
Test doubles shared by the healthgate test suites.
"""

import threading
from typing import List, Optional, Tuple

from healthgate.client.base import ReportCallback, ReportingClient
from healthgate.health.models import Metric, ReportResult


class FakeClock:
    """Manually advanced millisecond clock."""

    def __init__(self, start_millis: int = 1_000_000):
        self.millis = start_millis
        self._lock = threading.Lock()

    def __call__(self) -> int:
        with self._lock:
            return self.millis

    def advance(self, seconds: float) -> None:
        with self._lock:
            self.millis += int(seconds * 1000)


class TickingClock(FakeClock):
    """Clock that also moves forward by `tick_millis` on every read."""

    def __init__(self, start_millis: int = 1_000_000, tick_millis: int = 1):
        super().__init__(start_millis)
        self.tick_millis = tick_millis

    def __call__(self) -> int:
        with self._lock:
            self.millis += self.tick_millis
            return self.millis


class RecordingClient(ReportingClient):
    """Client that records every forward instead of delivering it."""

    def __init__(self, fail_with: Optional[Exception] = None):
        super().__init__(max_workers=1)
        self.fail_with = fail_with
        self.calls: List[Tuple[str, str, Metric]] = []
        self._lock = threading.Lock()

    def _record(self, mode: str, subject: str, metric: Metric) -> None:
        with self._lock:
            self.calls.append((mode, subject, metric))
        if self.fail_with is not None:
            raise self.fail_with

    def report(self, subject: str, metric: Metric) -> ReportResult:
        self._record("sync", subject, metric)
        return ReportResult.ACCEPTED

    def report_async(self, callback: Optional[ReportCallback], subject: str, metric: Metric):
        self._record("async", subject, metric)
        return None

    @property
    def scores(self) -> List[float]:
        return [metric.value.score for _, _, metric in self.calls]
