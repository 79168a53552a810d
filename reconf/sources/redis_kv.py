from __future__ import annotations

from typing import Any, Dict, Optional

import redis

from .env import render_env_lines


class RedisKeyValueSource:
    """Read every key under a prefix from Redis as ``KEY=VALUE`` lines.

    The prefix is stripped from the key names, so ``APP_PORT`` under prefix
    ``APP_`` reaches EnvFormatter as ``PORT``.
    """

    def __init__(
        self,
        uri: str,
        prefix: str = "",
        client: Optional[Any] = None,
    ):
        self.uri = uri
        self.prefix = prefix
        self.client = client or redis.Redis.from_url(uri, decode_responses=True)
        self.name = f"redis:{uri}"

    def _prefixed(self, key: str) -> str:
        return f"{self.prefix}{key}" if self.prefix else key

    def _unprefixed(self, key: str) -> str:
        if self.prefix and key.startswith(self.prefix):
            return key[len(self.prefix) :]
        return key

    def load(self) -> Dict[str, str]:
        keys = sorted(self.client.scan_iter(match=self._prefixed("*")))
        kv: Dict[str, str] = {}
        if keys:
            values = self.client.mget(keys)
            for k, v in zip(keys, values):
                # key expired between SCAN and MGET
                if v is None:
                    continue
                kv[self._unprefixed(k)] = v
        return kv

    def read(self) -> bytes:
        return render_env_lines(self.load().items())

    def __repr__(self) -> str:
        return f"RedisKeyValueSource({self.uri!r}, prefix={self.prefix!r})"
