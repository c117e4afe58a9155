"""
Aggregation buffer and rate limiter for health reports.
"""

from .buffer import AggregateValue, AggregationBuffer, current_millis
from .rate_limiter import CNT_THRESHOLD, WINDOW_SECONDS, Decision, RateLimiter

__all__ = [
    "AggregateValue",
    "AggregationBuffer",
    "current_millis",
    "CNT_THRESHOLD",
    "WINDOW_SECONDS",
    "Decision",
    "RateLimiter",
]
