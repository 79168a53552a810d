"""The configuration manager: reload pipeline, lifecycle and snapshot."""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Dict, List, Optional

from .errors import (
    ConstructorFailedError,
    ConstructorIsNoneError,
    ConstructorNotZeroError,
    ConstructorShapeError,
    DecodeError,
    LoaderInvalidError,
    MergeError,
    NoLoadersDefinedError,
    SourceError,
    ValidationError,
    ValidatorIsNoneError,
    WatcherStopError,
)
from .fields import has_method, is_config_instance, is_zero
from .merge import merge
from .source import Loader, Watcher
from .types import ConstructorFunc, Option, ValidateFunc

logger = logging.getLogger(__name__)


class ConfigManager:
    """Assemble, validate and keep live a typed configuration.

    Each registered Loader contributes one layer. On every reload the
    layers are read, decoded and merged in registration order (later
    loaders win), the result is validated, and only then does it replace
    the current snapshot. Loaders with a watcher trigger a reload whenever
    their watcher reports a change.

    Example:
        >>> manager = ConfigManager(Settings, with_json_file("config.json"), with_env())
        >>> manager.start()
        >>> manager.config().port
        8080
        >>> manager.stop()
    """

    def __init__(self, constructor: Optional[ConstructorFunc], *options: Optional[Option]):
        """Initialize the manager and apply options in order.

        Args:
            constructor: Zero-argument callable returning a zero-valued
                dataclass instance, usually the dataclass itself.
            *options: Functional options; None entries are skipped.
        """
        self._constructor = constructor
        self._loaders: List[Loader] = []
        self._validators: List[Optional[ValidateFunc]] = []
        self._named_validators: Dict[str, Optional[ValidateFunc]] = {}
        self._armed: List[Watcher] = []
        self._running = False
        self._stopping = threading.Event()
        self._lifecycle_lock = threading.Lock()
        self._snapshot_lock = threading.Lock()
        self._current: Any = None

        for opt in options:
            if opt is not None:
                opt(self)

    @classmethod
    def for_type(cls, config_type: type, *options: Optional[Option]) -> "ConfigManager":
        """Create a manager whose constructor is ``config_type`` itself."""
        return cls(config_type, *options)

    @property
    def running(self) -> bool:
        return self._running

    @property
    def loaders(self) -> List[Loader]:
        return list(self._loaders)

    def add_loader(self, loader: Loader) -> None:
        """Append a loader; it takes precedence over every earlier one."""
        if self._running:
            logger.warning(
                "loader added while running; its watcher is armed on the next start"
            )
        self._loaders.append(loader)

    def add_validator(self, validator: Optional[ValidateFunc]) -> None:
        self._validators.append(validator)

    def add_named_validator(self, name: str, validator: Optional[ValidateFunc]) -> None:
        self._named_validators[name] = validator

    def config(self) -> Any:
        """Return the current configuration, or None before the first load.

        The returned object is shared with other readers and must not be
        mutated.
        """
        with self._snapshot_lock:
            return self._current

    def reload(self) -> Any:
        """Rebuild the configuration from every loader and swap it in.

        Returns:
            The new configuration.

        Raises:
            SourceError: A source could not be read.
            DecodeError: A layer could not be decoded.
            MergeError: A layer could not be merged.
            ValidationError: The merged configuration was rejected.

        On any error the current snapshot is left as it was.
        """
        merged = self._constructor()
        for i, loader in enumerate(list(self._loaders)):
            try:
                data = loader.source.read()
            except Exception as e:
                raise SourceError(f"loader #{i}: read data from source: {e}") from e
            scratch = self._constructor()
            try:
                loader.formatter.unmarshal(data, scratch)
            except Exception as e:
                raise DecodeError(
                    f"loader #{i}: unmarshal data into {type(scratch).__name__}: {e}"
                ) from e
            try:
                merge(merged, scratch)
            except MergeError as e:
                raise MergeError(f"loader #{i}: {e}") from e

        self._validate(merged)

        with self._snapshot_lock:
            self._current = merged
        logger.debug("configuration reloaded from %d loader(s)", len(self._loaders))
        return merged

    def _validate(self, config: Any) -> None:
        if has_method(config, "validate"):
            try:
                config.validate()
            except Exception as e:
                raise ValidationError(f"validate {type(config).__name__}: {e}") from e
        for i, validator in enumerate(list(self._validators)):
            try:
                validator(config)
            except Exception as e:
                raise ValidationError(f"validator #{i}: {e}", validator=i) from e
        for name, validator in list(self._named_validators.items()):
            try:
                validator(config)
            except Exception as e:
                raise ValidationError(f"named validator {name!r}: {e}", validator=name) from e

    def _validate_constructor(self) -> None:
        if self._constructor is None:
            raise ConstructorIsNoneError()
        try:
            cfg = self._constructor()
        except Exception as e:
            raise ConstructorFailedError(e) from e
        if not is_config_instance(cfg):
            raise ConstructorShapeError(cfg)
        if not is_zero(cfg):
            raise ConstructorNotZeroError(cfg)

    def _validate_pre_run_state(self) -> None:
        self._validate_constructor()
        for i, validator in enumerate(self._validators):
            if validator is None:
                raise ValidatorIsNoneError(f"validator #{i} is None")
        for name, validator in self._named_validators.items():
            if validator is None:
                raise ValidatorIsNoneError(f"validator {name!r} is None")
        if not self._loaders:
            raise NoLoadersDefinedError()
        for i, loader in enumerate(self._loaders):
            if loader.source is None:
                raise LoaderInvalidError(f"loader #{i}: source is None")
            if loader.formatter is None:
                raise LoaderInvalidError(f"loader #{i}: formatter is None")

    def _on_change(self, index: int, loader: Loader) -> Callable[[], None]:
        def callback() -> None:
            if self._stopping.is_set():
                return
            try:
                self.reload()
            except Exception as e:
                logger.warning("reload triggered by loader #%d failed: %s", index, e)
                if loader.on_update_error is not None:
                    loader.on_update_error(e)
                return
            if loader.on_update_success is not None:
                loader.on_update_success()

        return callback

    def _run_watchers(self) -> None:
        for i, loader in enumerate(self._loaders):
            if loader.watcher is None:
                continue
            loader.watcher.watch(self._on_change(i, loader))
            self._armed.append(loader.watcher)
            logger.debug("watching loader #%d with %s", i, type(loader.watcher).__name__)

    def start(self) -> None:
        """Validate the setup, load once, then arm every watcher.

        Does nothing if the manager is already running. Any error leaves
        the manager stopped.
        """
        with self._lifecycle_lock:
            if self._running:
                return
            self._validate_pre_run_state()
            self.reload()
            self._stopping.clear()
            try:
                self._run_watchers()
            except Exception:
                self._stopping.set()
                for watcher in self._armed:
                    watcher.stop()
                self._armed.clear()
                raise
            self._running = True
        logger.info("config manager started with %d loader(s)", len(self._loaders))

    def stop(self) -> None:
        """Stop every armed watcher.

        Does nothing if the manager is not running. The manager always ends
        up stopped, even when some watchers fail to stop.

        Raises:
            WatcherStopError: Listing every watcher failure.
        """
        errors: List[BaseException] = []
        with self._lifecycle_lock:
            if not self._running:
                return
            self._stopping.set()
            try:
                for watcher in self._armed:
                    try:
                        watcher.stop()
                    except Exception as e:
                        errors.append(e)
            finally:
                self._armed.clear()
                self._running = False
        logger.info("config manager stopped")
        if errors:
            raise WatcherStopError(errors)

    def __enter__(self) -> "ConfigManager":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
