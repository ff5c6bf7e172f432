"""HTTP backend data source."""

from __future__ import annotations

from typing import Any, Optional

import httpx

from ..models.source import FetchResult
from .base import BaseSource, failure


class HttpDataSource(BaseSource):
    name = "http"

    def __init__(self, source_config: dict, backend_config: dict, transport: Any = None):
        super().__init__(source_config, backend_config)
        self.transport = transport

    async def get_json(self, path: str, params: Optional[dict] = None) -> FetchResult:
        base_url = self.backend.get("url", "http://localhost:5000")
        timeout = self.backend.get("timeout_seconds", 30)

        try:
            url = f"{base_url.rstrip('/')}{path}"
            async with httpx.AsyncClient(timeout=timeout, transport=self.transport) as client:
                response = await client.get(url, params=params)
                response.raise_for_status()
                data = response.json()

            return FetchResult(success=True, data=data)
        except Exception as e:
            return failure(str(e) or type(e).__name__)
