"""
Admission control for health reports.

The first observation of a (subject, metric) key is forwarded immediately.
Further observations are suppressed until more than `window_seconds` have
passed since the window opened; the next one then flushes the latest stored
value and the window restarts.
"""

import logging
from enum import Enum
from typing import Optional

from healthgate.client.base import ReportingClient
from healthgate.config import LimiterConfig
from healthgate.health.models import HealthStatus, new_metric

from .buffer import AggregationBuffer, Clock

logger = logging.getLogger(__name__)

CNT_THRESHOLD = 10
WINDOW_SECONDS = 30


class Decision(str, Enum):
    """Outcome of vetting one observation."""

    NEW = "new"
    REPEATED = "repeated"
    SUPPRESSED = "suppressed"

    @property
    def admitted(self) -> bool:
        return self is not Decision.SUPPRESSED


class RateLimiter:
    """
    Decides, per (subject, metric) key, whether an observation is forwarded.

    The buffer update and the decision run under the key's lock; forwarding
    to the client happens after the lock is released.

    Usage:
        limiter = RateLimiter(client)
        limiter.vet("db-1", "latency", HealthStatus.DEGRADED, 0.4)
        limiter.vet("db-1", "latency", HealthStatus.DEGRADED, 0.5, async_=True)
    """

    def __init__(
        self,
        client: ReportingClient,
        window_seconds: int = WINDOW_SECONDS,
        count_threshold: int = CNT_THRESHOLD,
        buffer: Optional[AggregationBuffer] = None,
        clock: Optional[Clock] = None,
    ):
        """
        Initialize rate limiter.

        Args:
            client: Client admitted reports are forwarded to
            window_seconds: Suppression window length
            count_threshold: Reserved; not consulted by the admission policy
            buffer: Aggregation buffer to use (a new one by default)
            clock: Millisecond clock for a newly created buffer
        """
        self.client = client
        self.window_seconds = window_seconds
        self.count_threshold = count_threshold
        self.buffer = buffer or AggregationBuffer(clock=clock)

    @classmethod
    def from_config(
        cls,
        client: ReportingClient,
        config: Optional[LimiterConfig] = None,
    ) -> "RateLimiter":
        """Build a rate limiter from configuration (environment by default)."""
        config = config or LimiterConfig()
        return cls(
            client,
            window_seconds=config.window_seconds,
            count_threshold=config.count_threshold,
        )

    def vet(
        self,
        subject: str,
        name: str,
        status: HealthStatus,
        score: float,
        async_: bool = False,
    ) -> Decision:
        """
        Record an observation and forward it if admitted.

        Args:
            subject: Entity the observation is about
            name: Metric name
            status: Observed health status
            score: Observed score
            async_: Forward with the client's asynchronous operation

        Returns:
            The decision taken for this observation

        Raises:
            ValueError: If subject or name is missing
        """
        with self.buffer.update(subject, name, status, score) as val:
            if val.count == 1:
                logger.debug(f"Permitting new report for [{subject}:{name}]")
                decision = Decision.NEW
            elif val.last_seen_millis - val.first_seen_millis > self.window_seconds * 1000:
                logger.info(
                    f"Permitting repeated report for [{subject}:{name}] "
                    f"{val.last_seen_millis - val.first_seen_millis}"
                )
                status = val.status
                score = val.score
                val.count = 0
                val.first_seen_millis = val.last_seen_millis
                decision = Decision.REPEATED
            else:
                logger.debug(f"Report for [{subject}:{name}] too frequent")
                decision = Decision.SUPPRESSED

        if decision.admitted:
            metric = new_metric(name, status, score)
            if async_:
                self.client.report_async(None, subject, metric)
            else:
                self.client.report(subject, metric)
        return decision
