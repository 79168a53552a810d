"""Environment-style (KEY=VALUE) configuration formatter."""

from __future__ import annotations

from typing import Any, Dict

from ..core.fields import coerce_string, is_config_type, iter_fields

_PAIR_LEN = 2


def parse_raw_into_map(raw: bytes) -> Dict[str, str]:
    """Parse ``KEY=VALUE`` lines into a dict.

    Empty lines and lines without ``=`` are skipped. The value is everything
    after the first ``=``, so values may themselves contain ``=``.

    Args:
        raw: Newline separated pairs.

    Returns:
        Dictionary of keys to raw string values.
    """
    res: Dict[str, str] = {}
    for line in raw.decode("utf-8").split("\n"):
        if not line:
            continue
        pair = line.split("=", 1)
        if len(pair) != _PAIR_LEN:
            continue
        res[pair[0]] = pair[1]
    return res


class EnvFormatter:
    """Decode ``KEY=VALUE`` data into a configuration dataclass.

    Only fields declaring ``metadata["env"]`` are populated, and a key set
    to the empty string counts as unset. Nested
    dataclass fields are walked with ``metadata["env_prefix"]`` prepended
    to their children's keys. Values are parsed into the annotated types:
    booleans accept ``1 t T TRUE true True`` and ``0 f F FALSE false
    False``, lists are comma separated and dicts are ``key:value`` pairs
    separated by commas.
    """

    def __init__(self, prefix: str = ""):
        """Initialize EnvFormatter.

        Args:
            prefix: Prepended to every key, e.g. ``"APP_"``.
        """
        self.prefix = prefix

    def unmarshal(self, data: bytes, target: Any) -> None:
        self._fill(target, parse_raw_into_map(data), self.prefix)

    def _fill(self, target: Any, env: Dict[str, str], prefix: str) -> None:
        for f, hint, optional in iter_fields(target):
            if is_config_type(hint) and "env" not in f.metadata:
                nested_prefix = prefix + f.metadata.get("env_prefix", "")
                nested = getattr(target, f.name)
                if nested is None:
                    nested = hint()
                    self._fill(nested, env, nested_prefix)
                    # leave an Optional None when nothing was set
                    if optional and not _touched(nested, env, nested_prefix):
                        continue
                    setattr(target, f.name, nested)
                else:
                    self._fill(nested, env, nested_prefix)
                continue
            name = f.metadata.get("env")
            if not name:
                continue
            key = prefix + name
            # unset and empty are the same thing
            if not env.get(key):
                continue
            setattr(target, f.name, coerce_string(hint, env[key], path=key))


def _touched(obj: Any, env: Dict[str, str], prefix: str) -> bool:
    for f, hint, _ in iter_fields(obj):
        if is_config_type(hint) and "env" not in f.metadata:
            if _touched(hint(), env, prefix + f.metadata.get("env_prefix", "")):
                return True
        elif f.metadata.get("env") and env.get(prefix + f.metadata["env"]):
            return True
    return False
