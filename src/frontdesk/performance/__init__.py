"""
Session performance metrics.
"""

from frontdesk.performance.tracker import (
    CallData,
    PerformanceInsights,
    PerformanceLevel,
    PerformanceTracker,
)

__all__ = [
    "CallData",
    "PerformanceInsights",
    "PerformanceLevel",
    "PerformanceTracker",
]
