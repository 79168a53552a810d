"""Formatters decoding raw source bytes into configuration dataclasses."""

from .env_format import EnvFormatter
from .ini_format import IniFormatter
from .json_format import JSONFormatter
from .yaml_format import YAMLFormatter

__all__ = [
    "EnvFormatter",
    "IniFormatter",
    "JSONFormatter",
    "YAMLFormatter",
]
