from __future__ import annotations

from typing import Dict, Optional

import httpx


class HttpSource:
    """Fetch configuration bytes with an HTTP GET.

    Any non-2xx response is an error, so a failing endpoint never replaces
    a good configuration with an error page.
    """

    def __init__(
        self,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        timeout: float = 20.0,
        client: Optional[httpx.Client] = None,
    ):
        self.url = url
        self.name = f"http:{url}"
        self._client = client or httpx.Client(headers=headers, timeout=timeout)

    def read(self) -> bytes:
        resp = self._client.get(self.url)
        resp.raise_for_status()
        return resp.content

    def close(self) -> None:
        self._client.close()

    def __repr__(self) -> str:
        return f"HttpSource({self.url!r})"
