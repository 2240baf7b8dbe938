"""
Call queue, call records and their persistence.
"""

from frontdesk.calls.models import CallOutcome, CallRecord, DialingStats, QueueInsights
from frontdesk.calls.queue import CallQueue, CallRecordSink, QueuePolicy

__all__ = [
    "CallOutcome",
    "CallQueue",
    "CallRecord",
    "CallRecordSink",
    "DialingStats",
    "QueueInsights",
    "QueuePolicy",
]
