from __future__ import annotations

import os
from pathlib import Path
from typing import Union


class FileSource:
    """Reads a configuration file from disk on every call."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self.name = f"file:{self.path.name}"

    def read(self) -> bytes:
        return self.path.read_bytes()

    def mod_time(self) -> float:
        return os.stat(self.path).st_mtime

    def __repr__(self) -> str:
        return f"FileSource({str(self.path)!r})"
