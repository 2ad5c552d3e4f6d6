"""Integration engine, statistics and telemetry."""

from .engine import IntegrationEngine
from .outcome import RunOutcome, RunStatus, TerminationReason
from .state import EngineState, EngineStatus
from .statistics import StatisticsReporter, StatisticsSnapshot
from .telemetry import (
    CallbackTelemetry,
    DiagnosticsRecorder,
    LoggingTelemetry,
    TelemetryFrame,
    TelemetryGroup,
    TelemetryHook,
    TextTelemetry,
)

__all__ = [
    "IntegrationEngine",
    "EngineState",
    "EngineStatus",
    "RunOutcome",
    "RunStatus",
    "TerminationReason",
    "StatisticsReporter",
    "StatisticsSnapshot",
    "TelemetryFrame",
    "TelemetryHook",
    "TelemetryGroup",
    "TextTelemetry",
    "LoggingTelemetry",
    "CallbackTelemetry",
    "DiagnosticsRecorder",
]
