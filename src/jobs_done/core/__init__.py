"""Core components for jobs-done."""

from .config import SettingsManager
from .session import SessionState, SessionStateStore
from .window import TimeIntent, TimeWindow, TimeWindowResolver, WindowSource

__all__ = [
    "SessionState",
    "SessionStateStore",
    "SettingsManager",
    "TimeIntent",
    "TimeWindow",
    "TimeWindowResolver",
    "WindowSource",
]
