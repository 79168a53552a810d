"""Polling watcher based on modification times."""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

from ..core.source import ModTimer

logger = logging.getLogger(__name__)

POLL_INTERVAL = 3.0
JOIN_TIMEOUT = 5.0


class ModTimeWatcher:
    """Poll a ModTimer and fire the callback when its mod time increases.

    The baseline is taken when ``watch`` is called, or at the first
    successful poll if the mod time cannot be read then. Errors from
    ``mod_time`` are skipped, so a file that briefly disappears during an
    atomic replace does not stop the watcher. Each ``watch`` call starts a
    daemon thread; ``stop`` signals it and waits for it to exit.
    """

    def __init__(self, mod_timer: ModTimer, interval: float = POLL_INTERVAL):
        """Initialize ModTimeWatcher.

        Args:
            mod_timer: Object reporting a modification time, e.g. FileSource.
            interval: Seconds between polls.
        """
        self.mod_timer = mod_timer
        self.interval = interval
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._last_mod: Optional[float] = None

    def watch(self, callback: Callable[[], None]) -> None:
        if self._thread is not None and self._thread.is_alive():
            raise RuntimeError(f"{self!r} is already watching")
        # each run owns its event, so a lingering old thread still sees its stop
        self._stop = threading.Event()
        try:
            self._last_mod = self.mod_timer.mod_time()
        except Exception as e:
            logger.debug("mod_time of %r failed: %s", self.mod_timer, e)
            self._last_mod = None
        self._thread = threading.Thread(
            target=self._run,
            args=(callback, self._stop),
            name=f"reconf-modtime-{self.mod_timer!r}",
            daemon=True,
        )
        self._thread.start()

    def _run(self, callback: Callable[[], None], stop: threading.Event) -> None:
        while not stop.wait(self.interval):
            try:
                mod_time = self.mod_timer.mod_time()
            except Exception as e:
                logger.debug("mod_time of %r failed: %s", self.mod_timer, e)
                continue
            if self._last_mod is None:
                self._last_mod = mod_time
            elif mod_time > self._last_mod:
                self._last_mod = mod_time
                try:
                    callback()
                except Exception:
                    logger.exception("change callback for %r raised", self.mod_timer)

    def stop(self) -> None:
        self._stop.set()
        thread, self._thread = self._thread, None
        if thread is None or thread is threading.current_thread():
            return
        thread.join(JOIN_TIMEOUT)
        if thread.is_alive():
            logger.warning("%r still running a change callback after stop", self)

    def __repr__(self) -> str:
        return f"ModTimeWatcher({self.mod_timer!r}, interval={self.interval})"
