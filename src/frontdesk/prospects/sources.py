"""
Prospect sources feeding the call queue.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from frontdesk.prospects.models import Prospect, ProspectStatus
from frontdesk.shared.logging import get_logger

logger = get_logger(__name__)


class ProspectSource(ABC):
    """Supplies the current candidate set on demand."""

    @abstractmethod
    def list_candidates(self) -> Sequence[Prospect]:
        """Return an immutable snapshot of the current candidates."""
        ...


class InMemoryProspectSource(ProspectSource):
    """Holds the last candidate set pushed by an external system."""

    def __init__(self, prospects: Iterable[Prospect] = ()) -> None:
        self._lock = threading.Lock()
        self._prospects: tuple[Prospect, ...] = tuple(prospects)

    def replace(self, prospects: Iterable[Prospect]) -> int:
        """Swap in a new candidate set and return its size."""
        snapshot = tuple(prospects)
        with self._lock:
            self._prospects = snapshot
        logger.info("Prospect source replaced", extra={"prospects": len(snapshot)})
        return len(snapshot)

    def list_candidates(self) -> Sequence[Prospect]:
        with self._lock:
            return self._prospects


@dataclass(frozen=True)
class CandidateRules:
    """Which prospects are worth dialing at all."""

    min_days_in_status: int = 2
    statuses: tuple[str, ...] = field(
        default=(
            ProspectStatus.PROSPECT.value,
            ProspectStatus.NEW.value,
            ProspectStatus.CALLBACK.value,
            ProspectStatus.FOLLOW_UP.value,
        )
    )

    def __post_init__(self) -> None:
        if self.min_days_in_status < 0:
            raise ValueError("min_days_in_status must be >= 0")

    def accepts(self, prospect: Prospect) -> bool:
        days = prospect.days_in_status
        if not isinstance(days, int) or days < self.min_days_in_status:
            return False
        wanted = {status.strip().casefold() for status in self.statuses}
        return (prospect.status or "").strip().casefold() in wanted


class FilteredProspectSource(ProspectSource):
    """Applies candidate rules on top of another source."""

    def __init__(self, inner: ProspectSource, rules: CandidateRules | None = None) -> None:
        self._inner = inner
        self._rules = rules or CandidateRules()

    @property
    def rules(self) -> CandidateRules:
        return self._rules

    def list_candidates(self) -> Sequence[Prospect]:
        candidates = self._inner.list_candidates()
        accepted = tuple(p for p in candidates if self._rules.accepts(p))
        if len(accepted) != len(candidates):
            logger.debug(
                "Candidate rules filtered prospects",
                extra={"received": len(candidates), "accepted": len(accepted)},
            )
        return accepted
