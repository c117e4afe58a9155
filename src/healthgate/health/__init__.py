"""
Health status and metric models.
"""

from .models import (
    HealthStatus,
    Metric,
    Observation,
    Report,
    ReportResult,
    Value,
    new_metric,
    new_observation,
    new_report,
)

__all__ = [
    "HealthStatus",
    "Metric",
    "Observation",
    "Report",
    "ReportResult",
    "Value",
    "new_metric",
    "new_observation",
    "new_report",
]
