from .environment import Environment
from .errors import (
    ConstructorError,
    DecodeError,
    LoaderInvalidError,
    ManifestError,
    MergeError,
    NoLoadersDefinedError,
    ReconfError,
    SourceError,
    ValidationError,
    ValidatorIsNoneError,
    WatcherStopError,
)
from .manager import ConfigManager
from .merge import merge
from .source import Formatter, Loader, ModTimer, Source, Watcher
from .types import Mergeable, Validatable

__all__ = [
    "ConfigManager",
    "Environment",
    "Loader",
    "Source",
    "Formatter",
    "Watcher",
    "ModTimer",
    "Validatable",
    "Mergeable",
    "merge",
    "ReconfError",
    "SourceError",
    "DecodeError",
    "MergeError",
    "ValidationError",
    "ConstructorError",
    "ValidatorIsNoneError",
    "NoLoadersDefinedError",
    "LoaderInvalidError",
    "WatcherStopError",
    "ManifestError",
]
