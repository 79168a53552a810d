from __future__ import annotations

import dataclasses
import json
from decimal import Decimal
from typing import Any, Optional

from ..core.fields import populate


def json_key(f: dataclasses.Field) -> Optional[str]:
    key = f.metadata.get("json", f.name)
    return None if key == "-" else key


class JSONFormatter:
    """Decode JSON objects into a configuration dataclass.

    Field keys come from ``metadata["json"]`` and default to the field
    name; a key of ``"-"`` excludes the field.
    """

    def __init__(self, disallow_unknown_fields: bool = False, use_decimal: bool = False):
        """Initialize JSONFormatter.

        Args:
            disallow_unknown_fields: Fail on object keys matching no field.
            use_decimal: Decode non-integer numbers as Decimal instead of
                float, keeping their exact textual value.
        """
        self.disallow_unknown_fields = disallow_unknown_fields
        self.use_decimal = use_decimal

    def unmarshal(self, data: bytes, target: Any) -> None:
        kwargs = {"parse_float": Decimal} if self.use_decimal else {}
        decoded = json.loads(data, **kwargs)
        populate(
            target,
            decoded,
            json_key,
            disallow_unknown=self.disallow_unknown_fields,
        )
