"""Process environment as a configuration source."""

from __future__ import annotations

import os
from typing import Iterable, Mapping, Optional


def render_env_lines(pairs: Iterable[tuple]) -> bytes:
    """Render key/value pairs as ``KEY=VALUE`` lines."""
    return "\n".join(f"{k}={v}" for k, v in pairs).encode("utf-8")


class EnvSource:
    """Expose environment variables as ``KEY=VALUE`` lines.

    Pair it with EnvFormatter. The environment is snapshotted on every
    read, so changes made by the process show up on the next reload.
    """

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        """Initialize EnvSource.

        Args:
            environ: Mapping to read instead of ``os.environ``.
        """
        self._environ = environ
        self.name = "env"

    def read(self) -> bytes:
        environ = os.environ if self._environ is None else self._environ
        return render_env_lines(dict(environ).items())

    def __repr__(self) -> str:
        return "EnvSource()"
