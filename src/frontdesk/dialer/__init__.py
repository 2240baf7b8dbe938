"""
Dialer collaborators: call sink, notifier and inbound monitor.
"""

from frontdesk.dialer.completions import CompletionRegistry
from frontdesk.dialer.interface import (
    CallCompletion,
    CallInitiationError,
    CallSink,
    CallSinkError,
    CompletionSignalError,
    InboundCallMonitor,
    NotificationLevel,
    NotifySink,
)

__all__ = [
    "CallCompletion",
    "CallInitiationError",
    "CallSink",
    "CallSinkError",
    "CompletionRegistry",
    "CompletionSignalError",
    "InboundCallMonitor",
    "NotificationLevel",
    "NotifySink",
]
