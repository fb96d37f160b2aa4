"""Authenticated requests against the picoli.site REST API."""
from typing import Any, Optional

import httpx
import logging

from picoli_mcp.core.config import Config

logger = logging.getLogger(__name__)


async def picoli_request(
    config: Config,
    path: str,
    method: str = "GET",
    body: Optional[Any] = None,
    headers: Optional[dict[str, str]] = None,
) -> httpx.Response:
    """Send one request to `config.base_url + path` and return the raw response.

    The JSON content type and the `x-api-key` header are always set; entries in
    `headers` override them. The status is not checked here.
    """
    url = f"{config.base_url}{path}"
    request_headers = {
        "Content-Type": "application/json",
        "x-api-key": config.api_key,
        **(headers or {}),
    }

    async with httpx.AsyncClient(timeout=config.request_timeout) as client:
        logger.debug("%s %s", method, url)
        return await client.request(method, url, json=body, headers=request_headers)
