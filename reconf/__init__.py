"""reconf - live configuration manager.

Assemble a typed dataclass configuration from layered sources, validate
it, and keep it current as the sources change.
"""

from .core.environment import Environment
from .core.errors import (
    ConstructorError,
    ConstructorFailedError,
    ConstructorIsNoneError,
    ConstructorNotZeroError,
    ConstructorShapeError,
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
from .core.manager import ConfigManager
from .core.merge import merge
from .core.options import (
    with_dynamic_json_file,
    with_dynamic_yaml_file,
    with_env,
    with_env_file,
    with_json_file,
    with_loader,
    with_named_validator,
    with_validator,
    with_yaml_file,
)
from .core.source import Formatter, Loader, ModTimer, Source, Watcher
from .core.types import Mergeable, Validatable

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
    "with_loader",
    "with_validator",
    "with_named_validator",
    "with_env",
    "with_env_file",
    "with_json_file",
    "with_yaml_file",
    "with_dynamic_json_file",
    "with_dynamic_yaml_file",
    "ReconfError",
    "SourceError",
    "DecodeError",
    "MergeError",
    "ValidationError",
    "ConstructorError",
    "ConstructorIsNoneError",
    "ConstructorFailedError",
    "ConstructorShapeError",
    "ConstructorNotZeroError",
    "ValidatorIsNoneError",
    "NoLoadersDefinedError",
    "LoaderInvalidError",
    "WatcherStopError",
    "ManifestError",
]
