"""Introspection helpers for dataclass configuration types.

The manager never looks at field semantics. It only needs to know what a
zero value is, how to walk the fields of a configuration instance, and how
to turn decoded data (a mapping of plain values) into typed field values.
Type coercion itself is left to pydantic.
"""

from __future__ import annotations

import dataclasses
import functools
import types
import typing
from collections.abc import Mapping as AbcMapping
from decimal import Decimal
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Tuple

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

# Returns the input key for a field, or None when the field is not mapped.
KeyFunc = Callable[[dataclasses.Field], Optional[str]]

_COLLECTIONS = (list, tuple, set, frozenset)
_ZEROABLE = (bool, int, float, complex, Decimal, str, bytes, bytearray, dict) + _COLLECTIONS

TRUE_STRINGS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
FALSE_STRINGS = frozenset({"0", "f", "F", "FALSE", "false", "False"})


def is_config_instance(obj: Any) -> bool:
    """Return True if ``obj`` is a dataclass instance (not a dataclass type)."""
    return dataclasses.is_dataclass(obj) and not isinstance(obj, type)


def is_config_type(hint: Any) -> bool:
    return isinstance(hint, type) and dataclasses.is_dataclass(hint)


def has_method(obj: Any, name: str) -> bool:
    """Return True if the class of ``obj`` defines a callable ``name``.

    A dataclass field of the same name hides the method, so a ``validate:
    bool`` setting is never mistaken for a ``validate()`` hook.
    """
    if not callable(getattr(type(obj), name, None)):
        return False
    if is_config_instance(obj):
        return name not in {f.name for f in dataclasses.fields(obj)}
    return True


@functools.lru_cache(maxsize=None)
def type_hints(cls: type) -> Dict[str, Any]:
    """Resolved field annotations of a dataclass type."""
    try:
        return typing.get_type_hints(cls)
    except NameError:
        # unresolvable forward references: keep the raw annotations
        return {f.name: f.type for f in dataclasses.fields(cls)}


@functools.lru_cache(maxsize=None)
def adapter(hint: Any) -> TypeAdapter:
    return TypeAdapter(hint)


def unwrap_optional(hint: Any) -> Tuple[Any, bool]:
    """Split ``Optional[X]`` into ``(X, True)``; other hints give ``(hint, False)``."""
    origin = typing.get_origin(hint)
    if origin is typing.Union or origin is types.UnionType:
        args = typing.get_args(hint)
        rest = tuple(a for a in args if a is not type(None))
        if len(rest) < len(args):
            if len(rest) == 1:
                return rest[0], True
            return typing.Union[rest], True
    return hint, False


def iter_fields(obj: Any) -> Iterator[Tuple[dataclasses.Field, Any, bool]]:
    """Yield ``(field, hint, optional)`` for every field of a dataclass instance."""
    hints = type_hints(type(obj))
    for f in dataclasses.fields(obj):
        hint, optional = unwrap_optional(hints.get(f.name, Any))
        yield f, hint, optional


def is_zero(value: Any) -> bool:
    """Return True if ``value`` is the zero value of its type.

    None, False, numeric zero, empty strings and empty collections are zero.
    A dataclass instance is zero when all of its fields are zero. Values of
    any other type are never zero.
    """
    if value is None:
        return True
    if is_config_instance(value):
        return all(
            field_is_zero(getattr(value, f.name), optional)
            for f, _, optional in iter_fields(value)
        )
    if isinstance(value, _ZEROABLE):
        return not value
    return False


def field_is_zero(value: Any, optional: bool) -> bool:
    """Zero test for a field value; an Optional field is zero only when None."""
    if value is None:
        return True
    if optional:
        return False
    return is_zero(value)


def populate(
    target: Any,
    data: Mapping[str, Any],
    key_for: KeyFunc,
    *,
    from_strings: bool = False,
    disallow_unknown: bool = False,
) -> None:
    """Set the fields of ``target`` that have a key in ``data``.

    Keys are first renamed to field names, then the whole mapping is
    validated against the dataclass with pydantic in lax mode. Only the
    fields that were present are copied onto ``target``; the others are
    left untouched. A null value for a non-Optional field is ignored.

    Args:
        target: Dataclass instance to fill in.
        data: Decoded mapping.
        key_for: Maps a field to its key in ``data``.
        from_strings: Values are strings, as in env or INI files; split
            lists and ``key:value`` maps and restrict boolean spellings.
        disallow_unknown: Reject keys that match no field.

    Raises:
        TypeError: If ``data`` is not a mapping.
        ValueError: If a value does not fit its field's annotation, or an
            unknown key is present while ``disallow_unknown`` is set.
    """
    cls = type(target)
    renamed = _rename(
        cls, data, key_for, from_strings=from_strings, disallow_unknown=disallow_unknown, path=""
    )
    validated = adapter(cls).validate_python(renamed)
    for name in renamed:
        setattr(target, name, getattr(validated, name))


def _rename(
    cls: type,
    data: Any,
    key_for: KeyFunc,
    *,
    from_strings: bool,
    disallow_unknown: bool,
    path: str,
) -> Dict[str, Any]:
    """Map the input keys of ``data`` onto the field names of ``cls``."""
    if not isinstance(data, AbcMapping):
        raise TypeError(
            f"{path or cls.__name__}: expected a mapping, got {type(data).__name__}"
        )
    hints = type_hints(cls)
    renamed: Dict[str, Any] = {}
    seen = set()
    for f in dataclasses.fields(cls):
        key = key_for(f)
        if key is None or key not in data:
            continue
        seen.add(key)
        raw = data[key]
        hint, optional = unwrap_optional(hints.get(f.name, Any))
        if raw is None and not optional:
            continue
        renamed[f.name] = _prepare(
            hint,
            raw,
            key_for,
            from_strings=from_strings,
            disallow_unknown=disallow_unknown,
            path=f"{path}.{key}" if path else key,
        )
    if disallow_unknown:
        unknown = sorted(str(k) for k in data if k not in seen)
        if unknown:
            where = f" in {path}" if path else ""
            raise ValueError(f"unknown field(s){where}: {', '.join(unknown)}")
    return renamed


def _prepare(
    hint: Any,
    raw: Any,
    key_for: KeyFunc,
    *,
    from_strings: bool,
    disallow_unknown: bool,
    path: str,
) -> Any:
    hint, _ = unwrap_optional(hint)
    if raw is None:
        return raw
    if is_config_type(hint):
        return _rename(
            hint, raw, key_for, from_strings=from_strings, disallow_unknown=disallow_unknown, path=path
        )
    origin = typing.get_origin(hint) or hint
    args = typing.get_args(hint)
    kwargs = dict(from_strings=from_strings, disallow_unknown=disallow_unknown)

    if origin in _COLLECTIONS:
        if from_strings and isinstance(raw, str):
            raw = split_list(raw)
        # variadic tuples and homogeneous collections share one element type
        if isinstance(raw, _COLLECTIONS) and (origin is not tuple or args[1:] == (...,)):
            elem = args[0] if args else Any
            return [
                _prepare(elem, item, key_for, path=f"{path}[{i}]", **kwargs)
                for i, item in enumerate(raw)
            ]
        if isinstance(raw, _COLLECTIONS) and len(args) == len(raw):
            return [
                _prepare(elem, item, key_for, path=f"{path}[{i}]", **kwargs)
                for i, (elem, item) in enumerate(zip(args, raw))
            ]
        return raw

    if origin in (dict, AbcMapping):
        if from_strings and isinstance(raw, str):
            raw = split_map(raw)
        if isinstance(raw, AbcMapping):
            value_hint = args[1] if len(args) == 2 else Any
            return {
                k: _prepare(value_hint, v, key_for, path=f"{path}.{k}", **kwargs)
                for k, v in raw.items()
            }
        return raw

    if from_strings and hint is bool and isinstance(raw, str):
        return parse_bool(raw, path=path)
    return raw


def coerce_string(hint: Any, raw: str, *, path: str = "") -> Any:
    """Parse an environment-style string into ``hint``.

    Raises:
        ValueError: If ``raw`` cannot be parsed.
    """
    prepared = _prepare(
        hint, raw, _field_name, from_strings=True, disallow_unknown=False, path=path
    )
    try:
        return adapter(hint).validate_python(prepared)
    except PydanticValidationError as e:
        reason = "; ".join(err["msg"] for err in e.errors())
        raise ValueError(f"{path}: cannot parse {raw!r}: {reason}") from e


def parse_bool(raw: str, *, path: str = "") -> bool:
    if raw in TRUE_STRINGS:
        return True
    if raw in FALSE_STRINGS:
        return False
    raise ValueError(f"{path}: invalid boolean {raw!r}")


def _field_name(f: dataclasses.Field) -> str:
    return f.name


def split_list(raw: str, sep: str = ",") -> List[str]:
    if not raw:
        return []
    return raw.split(sep)


def split_map(raw: str, sep: str = ",", kv_sep: str = ":") -> Dict[str, str]:
    pairs: Dict[str, str] = {}
    for item in split_list(raw, sep):
        if kv_sep not in item:
            raise ValueError(f"invalid map item {item!r}: missing {kv_sep!r}")
        key, value = item.split(kv_sep, 1)
        pairs[key] = value
    return pairs
