from __future__ import annotations

import threading
from typing import Callable, Optional


class TriggerWatcher:
    """Watcher fired by hand: every ``trigger()`` call runs the callback.

    Useful in tests and for reloading on an external signal.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._callback: Optional[Callable[[], None]] = None

    def watch(self, callback: Callable[[], None]) -> None:
        with self._lock:
            self._callback = callback

    def stop(self) -> None:
        with self._lock:
            self._callback = None

    def trigger(self) -> None:
        with self._lock:
            cb = self._callback
        if cb is not None:
            cb()
