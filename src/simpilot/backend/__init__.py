"""Simulator backends."""

from simpilot.backend.idb import IdbBackend
from simpilot.backend.interface import (
    AppInfo,
    ButtonType,
    CrashLogInfo,
    DebugServerStatus,
    SimulatorBackend,
    SimulatorInfo,
    SimulatorState,
)

__all__ = [
    "AppInfo",
    "ButtonType",
    "CrashLogInfo",
    "DebugServerStatus",
    "IdbBackend",
    "SimulatorBackend",
    "SimulatorInfo",
    "SimulatorState",
]
