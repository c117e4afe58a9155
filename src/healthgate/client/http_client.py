"""
HTTP reporting client.

Posts reports as JSON to a health-reporting service and reads back the
storage result.
"""

import logging
from typing import Optional

import httpx

from healthgate.health.models import Metric, ReportResult, new_report

from .base import ReportError, ReportingClient

logger = logging.getLogger(__name__)

REPORTS_PATH = "/api/v1/reports"


class HttpReportingClient(ReportingClient):
    """
    Client for pushing health reports over HTTP.

    Usage:
        client = HttpReportingClient(
            server_url="http://localhost:6688",
            observer="host1",
        )
        client.report("db-1", new_metric("latency", HealthStatus.DEGRADED, 0.4))
        client.report_async(None, "db-1", metric)
    """

    def __init__(
        self,
        server_url: str = "http://localhost:6688",
        observer: str = "localhost",
        timeout: float = 10.0,
        max_retries: int = 3,
        max_workers: int = 4,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Initialize HTTP reporting client.

        Args:
            server_url: Base URL of the health-reporting service
            observer: Identity this process reports as
            timeout: HTTP request timeout in seconds
            max_retries: Number of attempts per report
            max_workers: Worker threads for asynchronous reports
            transport: Optional httpx transport (used by tests)
        """
        super().__init__(max_workers=max_workers)
        self.server_url = server_url.rstrip("/")
        self.report_url = f"{self.server_url}{REPORTS_PATH}"
        self.observer = observer
        self.timeout = timeout
        self.max_retries = max(1, max_retries)

        # httpx.Client is safe to share between worker threads
        self.client = httpx.Client(timeout=self.timeout, transport=transport)

    def report(self, subject: str, metric: Metric) -> ReportResult:
        """
        Push a single metric about `subject`.

        Raises:
            ReportError: If every attempt fails
        """
        payload = new_report(self.observer, subject, metric).model_dump(mode="json")

        last_error: Optional[str] = None
        for attempt in range(self.max_retries):
            try:
                response = self.client.post(self.report_url, json=payload)
            except httpx.HTTPError as e:
                last_error = str(e)
                logger.warning(f"Report attempt {attempt + 1} for {subject} failed: {e}")
                continue

            if response.is_success:
                result = self._parse_result(response)
                logger.debug(f"Reported {metric.summary()} for {subject}: {result.name}")
                return result

            last_error = f"status {response.status_code}: {response.text}"
            logger.warning(
                f"Report attempt {attempt + 1} for {subject} returned {last_error}"
            )

        raise ReportError(
            f"Failed to report {metric.name} for {subject} after "
            f"{self.max_retries} attempts: {last_error}"
        )

    @staticmethod
    def _parse_result(response: httpx.Response) -> ReportResult:
        """
        Read the storage result from a successful reply.

        A 204 or empty body means the report was accepted.

        Raises:
            ReportError: If the body is not a recognised result
        """
        if response.status_code == 204 or not response.content.strip():
            return ReportResult.ACCEPTED
        try:
            body = response.json()
            return ReportResult(body.get("result", ReportResult.ACCEPTED))
        except (ValueError, AttributeError, TypeError) as e:
            raise ReportError(f"Unexpected report reply {response.text!r}: {e}") from e

    def close(self) -> None:
        """Drain pending reports and close the HTTP client."""
        super().close()
        self.client.close()


def create_http_client(
    server_url: Optional[str] = None,
    observer: str = "localhost",
    timeout: float = 10.0,
    max_retries: int = 3,
    max_workers: int = 4,
) -> HttpReportingClient:
    """
    Factory function to create an HttpReportingClient.

    Args:
        server_url: Service URL (defaults to http://localhost:6688)
        observer: Identity this process reports as
        timeout: HTTP request timeout
        max_retries: Number of attempts per report
        max_workers: Worker threads for asynchronous reports

    Returns:
        Configured HttpReportingClient instance
    """
    return HttpReportingClient(
        server_url=server_url or "http://localhost:6688",
        observer=observer,
        timeout=timeout,
        max_retries=max_retries,
        max_workers=max_workers,
    )
