"""
Domain exceptions shared across the dialer core and the HTTP surface.
"""

from typing import Any


class FrontdeskError(Exception):
    """Base exception for the dialer core."""


class NotFoundError(FrontdeskError):
    """Raised when a requested resource does not exist."""


class AutomationStateError(FrontdeskError):
    """Raised when a control request is illegal in the current run state."""

    def __init__(self, message: str, state: str) -> None:
        super().__init__(message)
        self.state = state


class ScoringFault(FrontdeskError):
    """Malformed prospect input; recovered inside the scorer with fallback scores."""

    def __init__(self, message: str, field: str, value: Any = None) -> None:
        super().__init__(message)
        self.field = field
        self.value = value


class DispatchFault(FrontdeskError):
    """A collaborator call failed during a dispatch cycle."""

    def __init__(
        self,
        message: str,
        prospect_id: str | None = None,
        sink_unreachable: bool = False,
    ) -> None:
        super().__init__(message)
        self.prospect_id = prospect_id
        self.sink_unreachable = sink_unreachable


class FatalSinkFault(FrontdeskError):
    """The call-initiation sink failed repeatedly; automation must be reset."""

    def __init__(self, message: str, consecutive_failures: int) -> None:
        super().__init__(message)
        self.consecutive_failures = consecutive_failures
