"""Change detectors that trigger configuration reloads."""

from .modtime import ModTimeWatcher
from .trigger import TriggerWatcher

__all__ = ["ModTimeWatcher", "TriggerWatcher"]
