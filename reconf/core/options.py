"""Functional options for building a ConfigManager."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Optional, Union

from .source import Loader
from .types import CallbackErrFunc, CallbackFunc, Option, ValidateFunc

if TYPE_CHECKING:
    from .manager import ConfigManager

PathLike = Union[str, Path]


def with_loader(loader: Loader) -> Option:
    """Add a ready-made loader."""

    def apply(cm: "ConfigManager") -> None:
        cm.add_loader(loader)

    return apply


def with_validator(validator: Optional[ValidateFunc]) -> Option:
    """Add a validator called with the merged configuration on each load."""

    def apply(cm: "ConfigManager") -> None:
        cm.add_validator(validator)

    return apply


def with_named_validator(name: str, validator: Optional[ValidateFunc]) -> Option:
    """Add a validator reported by ``name`` when it rejects a configuration.

    Registering the same name twice replaces the earlier validator.
    """

    def apply(cm: "ConfigManager") -> None:
        cm.add_named_validator(name, validator)

    return apply


def with_env(prefix: str = "") -> Option:
    """Add a layer read from the process environment."""
    from ..formatters.env_format import EnvFormatter
    from ..sources.env import EnvSource

    return with_loader(Loader(source=EnvSource(), formatter=EnvFormatter(prefix=prefix)))


def with_env_file(path: PathLike, prefix: str = "") -> Option:
    """Add a layer read from a .env file."""
    from ..formatters.env_format import EnvFormatter
    from ..sources.env_file import EnvFileSource

    return with_loader(
        Loader(source=EnvFileSource(path), formatter=EnvFormatter(prefix=prefix))
    )


def with_json_file(path: PathLike) -> Option:
    """Add a layer read once per reload from a JSON file."""
    from ..formatters.json_format import JSONFormatter
    from ..sources.file import FileSource

    return with_loader(Loader(source=FileSource(path), formatter=JSONFormatter()))


def with_yaml_file(path: PathLike) -> Option:
    """Add a layer read once per reload from a YAML file."""
    from ..formatters.yaml_format import YAMLFormatter
    from ..sources.file import FileSource

    return with_loader(Loader(source=FileSource(path), formatter=YAMLFormatter()))


def _dynamic_file(
    path: PathLike,
    formatter,
    on_update_success: Optional[CallbackFunc],
    on_update_error: Optional[CallbackErrFunc],
    interval: Optional[float],
) -> Option:
    from ..sources.file import FileSource
    from ..watchers.modtime import ModTimeWatcher

    source = FileSource(path)
    watcher = (
        ModTimeWatcher(source) if interval is None else ModTimeWatcher(source, interval)
    )
    return with_loader(
        Loader(
            source=source,
            formatter=formatter,
            watcher=watcher,
            on_update_success=on_update_success,
            on_update_error=on_update_error,
        )
    )


def with_dynamic_json_file(
    path: PathLike,
    on_update_success: Optional[CallbackFunc] = None,
    on_update_error: Optional[CallbackErrFunc] = None,
    interval: Optional[float] = None,
) -> Option:
    """Add a JSON file layer that reloads the configuration when the file changes.

    Args:
        path: JSON file to read.
        on_update_success: Called after a change was loaded.
        on_update_error: Called with the error when loading a change failed.
        interval: Poll interval in seconds; defaults to ModTimeWatcher's.
    """
    from ..formatters.json_format import JSONFormatter

    return _dynamic_file(path, JSONFormatter(), on_update_success, on_update_error, interval)


def with_dynamic_yaml_file(
    path: PathLike,
    on_update_success: Optional[CallbackFunc] = None,
    on_update_error: Optional[CallbackErrFunc] = None,
    interval: Optional[float] = None,
) -> Option:
    """YAML counterpart of with_dynamic_json_file."""
    from ..formatters.yaml_format import YAMLFormatter

    return _dynamic_file(path, YAMLFormatter(), on_update_success, on_update_error, interval)
