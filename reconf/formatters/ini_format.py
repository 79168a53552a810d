"""INI configuration formatter."""

from __future__ import annotations

import configparser
import dataclasses
from typing import Any, Dict, Optional

from ..core.fields import populate

# Disables configparser's DEFAULT section inheritance; no header can match it.
_NO_DEFAULT_SECTION = ""


def ini_key(f: dataclasses.Field) -> Optional[str]:
    key = f.metadata.get("ini", f.name)
    return None if key == "-" else key


class IniFormatter:
    """Decode INI files into a configuration dataclass.

    Keys of the ``[DEFAULT]`` section map onto top-level fields, every other
    section onto the nested dataclass field of the same name. Values are
    parsed from strings into the annotated field types. Key case is kept.
    """

    def __init__(self, top_level_section: str = "DEFAULT"):
        """Initialize IniFormatter.

        Args:
            top_level_section: Section whose keys map to top-level fields.
        """
        self.top_level_section = top_level_section

    def _to_mapping(self, parser: configparser.ConfigParser) -> Dict[str, Any]:
        mapping: Dict[str, Any] = {}
        for section in parser.sections():
            values = dict(parser.items(section))
            if section == self.top_level_section:
                mapping.update(values)
            else:
                mapping[section] = values
        return mapping

    def unmarshal(self, data: bytes, target: Any) -> None:
        parser = configparser.ConfigParser(
            default_section=_NO_DEFAULT_SECTION,
            interpolation=None,
        )
        parser.optionxform = str  # type: ignore[assignment]
        parser.read_string(data.decode("utf-8"))
        populate(target, self._to_mapping(parser), ini_key, from_strings=True)
