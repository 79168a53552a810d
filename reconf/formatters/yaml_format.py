from __future__ import annotations

import dataclasses
from typing import Any, Optional

import yaml

from ..core.fields import populate


def yaml_key(f: dataclasses.Field) -> Optional[str]:
    key = f.metadata.get("yaml", f.name)
    return None if key == "-" else key


class YAMLFormatter:
    """Decode YAML mappings into a configuration dataclass.

    Field keys come from ``metadata["yaml"]`` and default to the field
    name. An empty document decodes to nothing.
    """

    def __init__(self, disallow_unknown_fields: bool = False):
        self.disallow_unknown_fields = disallow_unknown_fields

    def unmarshal(self, data: bytes, target: Any) -> None:
        decoded = yaml.safe_load(data) or {}
        populate(
            target,
            decoded,
            yaml_key,
            disallow_unknown=self.disallow_unknown_fields,
        )
