"""
In-process reporting client delivering straight into a HealthStorage.
"""

import logging

from healthgate.health.models import Metric, ReportResult, new_report
from healthgate.store.storage import HealthStorage

from .base import ReportingClient

logger = logging.getLogger(__name__)


class LocalReportingClient(ReportingClient):
    """
    Reporting client for a storage living in the same process.

    Useful when the observer and the health service are co-located, and in
    tests.
    """

    def __init__(
        self,
        storage: HealthStorage,
        observer: str = "localhost",
        filter_subjects: bool = False,
        max_workers: int = 2,
    ):
        """
        Initialize local reporting client.

        Args:
            storage: Storage receiving the reports
            observer: Identity this process reports as
            filter_subjects: Drop reports about subjects the storage does not watch
            max_workers: Worker threads for asynchronous reports
        """
        super().__init__(max_workers=max_workers)
        self.storage = storage
        self.observer = observer
        self.filter_subjects = filter_subjects

    def report(self, subject: str, metric: Metric) -> ReportResult:
        result = self.storage.add_report(
            new_report(self.observer, subject, metric),
            filter=self.filter_subjects,
        )
        logger.debug(f"Stored {metric.summary()} for {subject}: {result.name}")
        return result
