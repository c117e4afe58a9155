"""
Raw health storage.

Keeps, for every watched subject, a panorama of views: one view per observer,
holding the most recent observations that observer reported.
"""

import copy
import logging
import threading
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Dict, Optional, Set

from healthgate.health.models import Observation, Report, ReportResult

logger = logging.getLogger(__name__)

MAX_REPORTS_PER_VIEW = 5


@dataclass
class View:
    """Observations one observer made about one subject, oldest first."""

    observer: str
    subject: str
    observations: Deque[Observation] = field(default_factory=deque)


@dataclass
class Panorama:
    """All views held for a subject, keyed by observer."""

    subject: str
    views: Dict[str, View] = field(default_factory=dict)


class HealthStorage:
    """
    In-memory store of health reports.

    A global lock guards the watch list and the subject maps; each subject
    has its own lock guarding its panorama.
    """

    def __init__(self, *subjects: str, max_reports_per_view: int = MAX_REPORTS_PER_VIEW):
        """
        Initialize health storage.

        Args:
            *subjects: Subjects to watch from the start
            max_reports_per_view: Observations kept per (observer, subject) view
        """
        self.max_reports_per_view = max_reports_per_view
        self._watchlist: Set[str] = set()
        self._tenants: Dict[str, Panorama] = {}
        self._locks: Dict[str, threading.Lock] = {}
        self._mu = threading.Lock()

        for subject in subjects:
            self._watchlist.add(subject)
            self._locks[subject] = threading.Lock()
            self._tenants[subject] = Panorama(subject=subject)

    def add_subject(self, subject: str) -> bool:
        """
        Add a subject to the watch list.

        Returns:
            True if the subject was not watched before
        """
        with self._mu:
            added = subject not in self._watchlist
            self._watchlist.add(subject)
        return added

    def remove_subject(self, subject: str, clean: bool = False) -> bool:
        """
        Remove a subject from the watch list.

        Args:
            subject: Subject to stop watching
            clean: Also drop every report stored for it

        Returns:
            True if the subject was being watched
        """
        with self._mu:
            removed = subject in self._watchlist
            self._watchlist.discard(subject)
            if clean:
                self._tenants.pop(subject, None)
                self._locks.pop(subject, None)
        return removed

    def is_watched(self, subject: str) -> bool:
        with self._mu:
            return subject in self._watchlist

    def add_report(self, report: Report, filter: bool = True) -> ReportResult:
        """
        Store a report.

        Args:
            report: Report to store
            filter: Ignore reports about subjects not on the watch list;
                when False, the subject is added to the watch list instead

        Returns:
            ReportResult.IGNORED if filtered out, else ReportResult.ACCEPTED
        """
        subject = report.subject
        with self._mu:
            if subject not in self._watchlist:
                if filter:
                    logger.info(f"{subject} not in watch list, ignoring report")
                    return ReportResult.IGNORED
                self._watchlist.add(subject)
            lock = self._locks.setdefault(subject, threading.Lock())
            panorama = self._tenants.setdefault(subject, Panorama(subject=subject))

        logger.debug(f"Adding report for {subject} from {report.observer}")
        with lock:
            view = panorama.views.get(report.observer)
            if view is None:
                view = View(observer=report.observer, subject=subject)
                panorama.views[report.observer] = view
                logger.debug(f"Created view for {report.observer}->{subject}")
            view.observations.append(report.observation)
            while len(view.observations) > self.max_reports_per_view:
                view.observations.popleft()
        return ReportResult.ACCEPTED

    def _tenant(self, subject: str):
        with self._mu:
            if subject not in self._watchlist:
                return None, None
            return self._tenants.get(subject), self._locks.get(subject)

    def get_panorama(self, subject: str) -> Optional[Panorama]:
        """Copy of a watched subject's panorama, or None."""
        panorama, lock = self._tenant(subject)
        if panorama is None or lock is None:
            return None
        with lock:
            return copy.deepcopy(panorama)

    def get_latest_report(self, subject: str) -> Optional[Report]:
        """
        Most recent observation about a subject across all observers.

        Returns:
            Report rebuilt from the newest observation, or None if nothing
            has been stored for the subject
        """
        panorama, lock = self._tenant(subject)
        if panorama is None or lock is None:
            return None

        latest: Optional[Observation] = None
        who: Optional[str] = None
        with lock:
            for observer, view in panorama.views.items():
                if not view.observations:
                    continue
                candidate = view.observations[-1]
                if latest is None or candidate.ts > latest.ts:
                    latest = candidate
                    who = observer

        if latest is None or who is None:
            return None
        return Report(observer=who, subject=subject, observation=latest.model_copy(deep=True))

    def dump(self) -> str:
        """Human-readable listing of every stored observation."""
        with self._mu:
            tenants = [
                (subject, panorama, self._locks.get(subject))
                for subject, panorama in self._tenants.items()
            ]

        lines = []
        for subject, panorama, lock in tenants:
            lines.append(f"============={subject}=============")
            if lock is None:
                continue
            with lock:
                for observer, view in panorama.views.items():
                    lines.append(
                        f"{len(view.observations)} observations for {observer}->{subject}"
                    )
                    for observation in view.observations:
                        lines.append(f"|{observer}| {observation.summary()}")
        return "\n".join(lines)
