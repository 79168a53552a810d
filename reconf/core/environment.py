"""Environments: named loader stacks declared in a reconf.yaml manifest."""

from __future__ import annotations

import importlib
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .errors import ManifestError
from .manager import ConfigManager
from .manifest import ManifestLoader
from .options import with_loader
from .source import Formatter, Loader
from .types import ConstructorFunc, Option


class Environment:
    """Manage the loaders of a specific environment.

    An Environment represents the ordered loaders declared for one name
    (e.g. ``production``) in reconf.yaml, plus any passed explicitly, and
    builds a ConfigManager from them.
    """

    def __init__(
        self,
        name: str,
        loaders: Optional[List[Loader]] = None,
        config_path: Optional[Union[str, Path]] = None,
    ):
        """Initialize an Environment.

        Args:
            name: Name of the environment (e.g., "production", "development").
            loaders: Optional loaders appended after the manifest's, so they
                take precedence.
            config_path: Optional path to reconf.yaml. If not provided,
                searches the current and parent directories.

        Raises:
            ManifestError: If a loader entry of the manifest is invalid.
        """
        self.name = name
        self._loaders: List[Loader] = []
        self._manifest = ManifestLoader(config_path)

        for entry in self._manifest.get_loaders(self.name):
            self.add_loader(self._create_loader(self._manifest.parse_loader(entry)))

        for loader in loaders or []:
            self.add_loader(loader)

    def add_loader(self, loader: Loader) -> None:
        self._loaders.append(loader)

    @property
    def loaders(self) -> List[Loader]:
        return list(self._loaders)

    def _create_formatter(self, fmt: str, prefix: str) -> Formatter:
        if fmt == "json":
            from ..formatters.json_format import JSONFormatter

            return JSONFormatter()
        if fmt == "yaml":
            from ..formatters.yaml_format import YAMLFormatter

            return YAMLFormatter()
        if fmt == "ini":
            from ..formatters.ini_format import IniFormatter

            return IniFormatter()
        from ..formatters.env_format import EnvFormatter

        return EnvFormatter(prefix=prefix)

    def _create_loader(self, parsed: Dict[str, Any]) -> Loader:
        """Create a Loader from a parsed manifest entry.

        Args:
            parsed: Output of ManifestLoader.parse_loader.

        Returns:
            Loader instance.

        Raises:
            ManifestError: If the URI scheme is not supported.
        """
        kind = parsed["kind"]
        prefix = parsed.get("prefix", "")
        # prefixes of Redis keys are stripped by the source itself
        formatter = self._create_formatter(parsed["format"], "" if kind == "uri" else prefix)

        if kind == "env":
            from ..sources.env import EnvSource

            return Loader(source=EnvSource(), formatter=formatter)
        if kind == "uri":
            target = str(parsed["target"])
            if not target.startswith(("redis://", "rediss://", "unix://")):
                raise ManifestError(f"Unsupported loader URI: {target}")
            from ..sources.redis_kv import RedisKeyValueSource

            return Loader(source=RedisKeyValueSource(target, prefix=prefix), formatter=formatter)
        if kind == "url":
            from ..sources.http import HttpSource

            return Loader(
                source=HttpSource(parsed["target"], headers=parsed.get("headers")),
                formatter=formatter,
            )

        path = Path(parsed["target"])
        if self._manifest.config_path is not None and not path.is_absolute():
            path = self._manifest.config_path.parent / path
        if parsed["format"] == "env":
            from ..sources.env_file import EnvFileSource

            source: Any = EnvFileSource(path)
        else:
            from ..sources.file import FileSource

            source = FileSource(path)
        watcher = None
        if parsed.get("watch"):
            from ..watchers.modtime import ModTimeWatcher

            if "interval" in parsed:
                watcher = ModTimeWatcher(source, parsed["interval"])
            else:
                watcher = ModTimeWatcher(source)
        return Loader(source=source, formatter=formatter, watcher=watcher)

    def config_type(self) -> type:
        """Import the configuration class named by the manifest's ``type``.

        Raises:
            ManifestError: If no type is declared or it cannot be imported.
        """
        type_path = self._manifest.get_type(self.name)
        if not type_path:
            raise ManifestError(f"Environment {self.name!r} declares no 'type'")
        module_name, _, attr = type_path.partition(":")
        if not attr:
            raise ManifestError(f"Type must look like 'module:Class', got {type_path!r}")
        try:
            module = importlib.import_module(module_name)
        except ImportError as e:
            raise ManifestError(f"Cannot import {module_name!r}: {e}") from e
        try:
            return getattr(module, attr)
        except AttributeError as e:
            raise ManifestError(f"{module_name!r} has no attribute {attr!r}") from e

    def options(self) -> List[Option]:
        return [with_loader(loader) for loader in self._loaders]

    def manager(
        self, constructor: Optional[ConstructorFunc] = None, *options: Optional[Option]
    ) -> ConfigManager:
        """Build a ConfigManager with this environment's loaders.

        Args:
            constructor: Configuration constructor; defaults to config_type().
            *options: Extra options applied after the loaders.
        """
        if constructor is None:
            constructor = self.config_type()
        return ConfigManager(constructor, *self.options(), *options)

    @property
    def config_file_path(self) -> Optional[Path]:
        return self._manifest.config_path
