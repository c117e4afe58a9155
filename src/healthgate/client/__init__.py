"""
Reporting clients: the capability the rate limiter forwards through, and its
HTTP and in-process implementations.
"""

from typing import Optional

from healthgate.config import ClientConfig

from .base import ReportCallback, ReportError, ReportingClient
from .http_client import HttpReportingClient, create_http_client
from .local import LocalReportingClient


def create_reporting_client(config: Optional[ClientConfig] = None) -> HttpReportingClient:
    """Build an HTTP reporting client from configuration (environment by default)."""
    config = config or ClientConfig()
    return create_http_client(
        server_url=config.server_url,
        observer=config.observer,
        timeout=config.timeout,
        max_retries=config.max_retries,
        max_workers=config.max_workers,
    )


__all__ = [
    "ReportCallback",
    "ReportError",
    "ReportingClient",
    "HttpReportingClient",
    "LocalReportingClient",
    "create_http_client",
    "create_reporting_client",
]
