"""Exception hierarchy for the reconf configuration manager."""

from __future__ import annotations

from typing import List, Optional, Union


class ReconfError(Exception):
    """Base class for every error raised by reconf."""


class SourceError(ReconfError):
    """A loader's source could not be read."""


class DecodeError(ReconfError):
    """Raw source data could not be decoded into the configuration type."""


class MergeError(ReconfError):
    """A partial configuration could not be merged into the accumulator."""


class ValidationError(ReconfError):
    """The merged configuration was rejected by a validator.

    Attributes:
        validator: Index of a positional validator, name of a named
            validator, or None when the configuration's own ``validate``
            method failed.
    """

    def __init__(self, message: str, validator: Optional[Union[int, str]] = None):
        super().__init__(message)
        self.validator = validator


class ConstructorError(ReconfError):
    """The configuration constructor is unusable."""


class ConstructorIsNoneError(ConstructorError):
    def __init__(self) -> None:
        super().__init__("constructor is None")


class ConstructorFailedError(ConstructorError):
    def __init__(self, cause: BaseException) -> None:
        super().__init__(f"constructor raised: {cause}")


class ConstructorShapeError(ConstructorError):
    def __init__(self, got: object) -> None:
        super().__init__(
            f"constructor must return a dataclass instance, got {type(got).__name__}"
        )


class ConstructorNotZeroError(ConstructorError):
    def __init__(self, got: object) -> None:
        super().__init__(
            f"constructor must return a zero (empty) {type(got).__name__}"
        )


class ValidatorIsNoneError(ReconfError):
    """A registered validator is None."""


class NoLoadersDefinedError(ReconfError):
    def __init__(self) -> None:
        super().__init__("no loaders defined")


class LoaderInvalidError(ReconfError):
    """A loader is missing its source or formatter."""


class WatcherStopError(ReconfError):
    """One or more watchers failed to stop.

    Attributes:
        errors: Every exception raised by a watcher's ``stop``.
    """

    def __init__(self, errors: List[BaseException]):
        joined = "; ".join(str(e) for e in errors)
        super().__init__(f"stop running watchers: {joined}")
        self.errors = list(errors)


class ManifestError(ReconfError):
    """A reconf.yaml manifest is invalid."""
