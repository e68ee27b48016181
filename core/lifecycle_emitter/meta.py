"""Reserved meta-channels and the listener-error reporting guard."""

from __future__ import annotations

from enum import StrEnum
from types import TracebackType


class MetaChannel(StrEnum):
    """
    Internal notification channels, kept apart from user events.

    The ``#`` prefix is reserved. Meta-channels never trigger has/no-listener
    notifications themselves.
    """

    HAS_LISTENERS = "#has-listeners"  # event went from 0 to 1 listeners
    NO_LISTENERS = "#no-listeners"  # event went from 1 to 0 listeners
    LISTENER_ERROR = "#listener-error"  # a listener raised


class ReportState(StrEnum):
    IDLE = "idle"
    REPORTING = "reporting"


class ErrorReportGuard:
    """
    IDLE -> REPORTING -> IDLE state machine around a nested error report.

    While a meta-listener failure is being reported through the listener-error
    channel the guard is REPORTING, and any further failure is logged instead
    of reported. The error chain therefore stops after two levels.

    Usage:
        guard = ErrorReportGuard()
        if not guard.reporting:
            with guard:
                report(error)
    """

    def __init__(self) -> None:
        self._state = ReportState.IDLE

    @property
    def state(self) -> ReportState:
        return self._state

    @property
    def reporting(self) -> bool:
        return self._state is ReportState.REPORTING

    def __enter__(self) -> ErrorReportGuard:
        if self._state is ReportState.REPORTING:
            raise RuntimeError("Error report already in progress")
        self._state = ReportState.REPORTING
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self._state = ReportState.IDLE
