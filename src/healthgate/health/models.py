"""
Health observation models.

A metric is a named (status, score) pair. Observations bundle metrics taken at
one point in time, and a report says which observer saw that observation about
which subject.
"""

from datetime import datetime, timezone
from enum import Enum, IntEnum
from typing import Dict, Optional

from pydantic import BaseModel, Field


class HealthStatus(str, Enum):
    """Health status of a single metric."""

    INVALID = "invalid"
    NORMAL = "normal"
    UNSURE = "unsure"
    PENDING = "pending"
    DEGRADED = "degraded"
    ABNORMAL = "abnormal"


class ReportResult(IntEnum):
    """Outcome of delivering a report to health storage."""

    IGNORED = 0
    ACCEPTED = 1
    FAILED = 2


class Value(BaseModel):
    """Status and score carried by a metric."""

    status: HealthStatus = Field(description="Health status")
    score: float = Field(description="Score backing the status")


class Metric(BaseModel):
    """A named health value (e.g. latency, disk, rpc_errors)."""

    name: str = Field(min_length=1, description="Metric name")
    value: Value

    def summary(self) -> str:
        """One-line description for logging."""
        return f"{self.name}={self.value.status.value}({self.value.score:g})"


class Observation(BaseModel):
    """Metrics observed about a subject at one point in time."""

    ts: datetime = Field(description="When the observation was made")
    metrics: Dict[str, Metric] = Field(default_factory=dict)

    def summary(self) -> str:
        parts = [self.ts.isoformat()]
        parts.extend(m.summary() for m in self.metrics.values())
        return " ".join(parts)


class Report(BaseModel):
    """An observation about `subject` made by `observer`."""

    observer: str = Field(min_length=1, description="Entity making the observation")
    subject: str = Field(min_length=1, description="Entity being observed")
    observation: Observation


def new_metric(name: str, status: HealthStatus, score: float) -> Metric:
    """
    Build a metric from its name, status and score.

    Args:
        name: Metric name
        status: Health status
        score: Score backing the status

    Returns:
        Metric instance
    """
    return Metric(name=name, value=Value(status=status, score=score))


def new_observation(ts: Optional[datetime] = None, *metrics: Metric) -> Observation:
    """Build an observation holding `metrics`, keyed by metric name."""
    return Observation(
        ts=ts or datetime.now(timezone.utc),
        metrics={metric.name: metric for metric in metrics},
    )


def new_report(observer: str, subject: str, *metrics: Metric) -> Report:
    """Build a report of `metrics` about `subject`, stamped with the current time."""
    return Report(
        observer=observer,
        subject=subject,
        observation=new_observation(None, *metrics),
    )
