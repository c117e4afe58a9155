"""
healthgate - client-side admission control for health reports

This package keeps a reporting process from flooding a health-reporting
service with repeated updates for the same signal. Observations are keyed by
(subject, metric name); the first one is forwarded, repeats are suppressed,
and once the suppression window elapses the latest value is flushed.

Main modules:
- limiter: aggregation buffer and rate limiter
- client: reporting client capability and its HTTP / in-process implementations
- store: raw health storage on the receiving side
- health: health status and metric models
- config: environment-driven settings
"""

__version__ = "0.1.0"
__author__ = "healthgate maintainers"

import logging
from typing import Optional

from healthgate.config import get_config

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """
    Configure root logging for processes embedding healthgate.

    Library modules only create loggers; the host process decides where
    records go. This helper applies the standard healthgate format.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR); defaults to
            the configured `log_level` (HEALTHGATE_LOG_LEVEL)
    """
    if level is None:
        level = get_config().log_level
    logging.basicConfig(level=getattr(logging, level.upper()), format=LOG_FORMAT)


__all__ = ["__version__", "__author__", "LOG_FORMAT", "configure_logging"]
