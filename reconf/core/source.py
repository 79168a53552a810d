"""Source, formatter and watcher protocols, and the Loader record."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional, Protocol, runtime_checkable

from .types import CallbackErrFunc, CallbackFunc


class Source(Protocol):
    """Protocol defining the interface for configuration sources.

    A source produces the raw bytes of one configuration layer. It is read
    afresh on every reload, so implementations must not cache.
    """

    def read(self) -> bytes:
        """Read raw configuration data.

        Returns:
            The current bytes of the source.

        Raises:
            Exception: Any I/O failure; the manager wraps it in SourceError.
        """
        ...


class Formatter(Protocol):
    """Protocol for decoders turning raw bytes into a configuration object."""

    def unmarshal(self, data: bytes, target: Any) -> None:
        """Populate ``target`` from ``data``.

        Only fields present in ``data`` are set; absent fields keep their
        zero value so that merging a partial layer never erases anything.

        Args:
            data: Raw bytes read from a source.
            target: A zero-valued configuration instance to fill in.
        """
        ...


class Watcher(Protocol):
    """Protocol for background change detectors."""

    def watch(self, callback: Callable[[], None]) -> None:
        """Start watching and call ``callback`` on every detected change.

        Must return immediately; detection happens out of band.
        """
        ...

    def stop(self) -> None:
        """Stop watching.

        Raises:
            Exception: If the watcher could not be stopped cleanly.
        """
        ...


@runtime_checkable
class ModTimer(Protocol):
    """Something that can report when its data was last modified."""

    def mod_time(self) -> float:
        """Return the modification time as a POSIX timestamp."""
        ...


@dataclass
class Loader:
    """One configuration layer registered with a ConfigManager.

    Attributes:
        source: Where the raw bytes come from.
        formatter: How the bytes are decoded.
        watcher: Optional change detector triggering reloads.
        on_update_success: Called after a watcher-triggered reload succeeds.
        on_update_error: Called with the error when such a reload fails.
    """

    source: Optional[Source]
    formatter: Optional[Formatter]
    watcher: Optional[Watcher] = None
    on_update_success: Optional[CallbackFunc] = None
    on_update_error: Optional[CallbackErrFunc] = None
