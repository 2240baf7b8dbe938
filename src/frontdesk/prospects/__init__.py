"""
Prospect snapshots, scoring and sources.
"""

from frontdesk.prospects.models import (
    Analysis,
    CallStrategy,
    CallTiming,
    Priority,
    Prospect,
    ProspectStatus,
    ScoredProspect,
)
from frontdesk.prospects.scorer import ProspectScorer

__all__ = [
    "Analysis",
    "CallStrategy",
    "CallTiming",
    "Priority",
    "Prospect",
    "ProspectScorer",
    "ProspectStatus",
    "ScoredProspect",
]
