"""Configuration source implementations.

This package contains the byte-producing sources a Loader reads from:
the process environment, plain files, .env files, Redis and HTTP.
"""

from .env import EnvSource
from .env_file import EnvFileSource
from .file import FileSource
from .http import HttpSource
from .redis_kv import RedisKeyValueSource

__all__ = [
    "EnvSource",
    "EnvFileSource",
    "FileSource",
    "HttpSource",
    "RedisKeyValueSource",
]
