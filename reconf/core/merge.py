"""Merging logic for partial configuration layers."""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import Any

from .errors import MergeError
from .fields import field_is_zero, has_method, is_config_instance, iter_fields


def merge(dst: Any, src: Any) -> None:
    """Merge the partial configuration ``src`` into ``dst`` in place.

    If the configuration class defines a ``merge`` method (``Mergeable``), it
    does all the work. Otherwise fields are merged structurally: non-zero
    values in ``src`` override ``dst``, zero values never erase anything,
    sequences are replaced wholesale, mappings are overlaid key by key and
    nested dataclasses are merged recursively.

    Args:
        dst: Accumulator, a dataclass instance.
        src: Freshly decoded layer of the same type.

    Raises:
        MergeError: If either argument is not a dataclass instance, the
            types differ, or a custom ``merge`` fails.
    """
    if not is_config_instance(dst) or not is_config_instance(src):
        raise MergeError(
            f"merge requires dataclass instances, got {type(dst).__name__} "
            f"and {type(src).__name__}"
        )
    if type(dst) is not type(src):
        raise MergeError(
            f"cannot merge {type(src).__name__} into {type(dst).__name__}"
        )
    if has_method(dst, "merge"):
        try:
            dst.merge(src)
        except MergeError:
            raise
        except Exception as e:
            raise MergeError(f"{type(dst).__name__}.merge: {e}") from e
        return
    _merge_fields(dst, src)


def _merge_fields(dst: Any, src: Any) -> None:
    for f, _, optional in iter_fields(src):
        incoming = getattr(src, f.name)
        if field_is_zero(incoming, optional):
            continue
        current = getattr(dst, f.name)
        if is_config_instance(incoming) and type(current) is type(incoming):
            merge(current, incoming)
        elif isinstance(incoming, Mapping) and isinstance(current, Mapping):
            # new keys added, existing keys overwritten, the rest kept
            merged = dict(current)
            merged.update(copy.deepcopy(dict(incoming)))
            setattr(dst, f.name, merged)
        else:
            setattr(dst, f.name, copy.deepcopy(incoming))
