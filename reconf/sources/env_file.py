"""Environment file (.env) configuration source."""

from __future__ import annotations

import io
import os
from pathlib import Path
from typing import Union

from dotenv import dotenv_values

from .env import render_env_lines


class EnvFileSource:
    """Configuration source for .env files.

    The file is parsed with python-dotenv, so quoting, ``export`` prefixes,
    comments and variable expansion follow its rules. The result is handed
    on as plain ``KEY=VALUE`` lines for EnvFormatter. Keys declared without
    a value are dropped.
    """

    def __init__(self, path: Union[str, Path], interpolate: bool = True):
        """Initialize EnvFileSource.

        Args:
            path: Path to the .env file.
            interpolate: Expand ``${VAR}`` references.
        """
        self.path = Path(path)
        self.interpolate = interpolate
        self.name = f"env:{self.path.name}"

    def read(self) -> bytes:
        text = self.path.read_text(encoding="utf-8")
        values = dotenv_values(stream=io.StringIO(text), interpolate=self.interpolate)
        return render_env_lines((k, v) for k, v in values.items() if v is not None)

    def mod_time(self) -> float:
        return os.stat(self.path).st_mtime

    def __repr__(self) -> str:
        return f"EnvFileSource({str(self.path)!r})"
