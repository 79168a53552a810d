"""Type definitions for the reconf configuration system."""

from __future__ import annotations

from typing import Any, Callable, Protocol

# Builds a zero-valued configuration instance, usually the dataclass itself.
ConstructorFunc = Callable[[], Any]

CallbackFunc = Callable[[], None]
CallbackErrFunc = Callable[[BaseException], None]

# Manager-level validator, called with the merged candidate; raises to reject it.
ValidateFunc = Callable[[Any], None]


class Validatable(Protocol):
    """Configuration types implementing this are validated on every reload."""

    def validate(self) -> None:
        """Raise to reject the configuration."""
        ...


class Mergeable(Protocol):
    """Configuration types implementing this merge partial layers themselves.

    When present, ``merge`` replaces the generic field-by-field merge for
    the type entirely.
    """

    def merge(self, other: Any) -> None:
        """Merge ``other`` (same type) into ``self``; raise on failure."""
        ...


# Functional option applied to a ConfigManager at construction time.
Option = Callable[[Any], None]
