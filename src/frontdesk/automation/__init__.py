"""
Automation loop: run-state machine and timers.
"""

from frontdesk.automation.controller import (
    AutomationConfig,
    AutomationController,
    BreakReason,
    CallPreparation,
    CycleResult,
    CycleStatus,
    RunState,
)
from frontdesk.automation.timers import OneShotTimer, PeriodicTimer

__all__ = [
    "AutomationConfig",
    "AutomationController",
    "BreakReason",
    "CallPreparation",
    "CycleResult",
    "CycleStatus",
    "OneShotTimer",
    "PeriodicTimer",
    "RunState",
]
