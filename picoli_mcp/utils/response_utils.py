"""Helpers that turn upstream responses into MCP tool results."""
from __future__ import annotations

import json
import logging
from typing import Any

import httpx
from mcp.types import CallToolResult, TextContent

from picoli_mcp.core.config import Config

logger = logging.getLogger(__name__)


def short_url(config: Config, slug: str) -> str:
    """Short links are always built locally from the configured base URL."""
    return f"{config.base_url}/{slug}"


def json_result(payload: Any) -> CallToolResult:
    text = json.dumps(payload, indent=2, ensure_ascii=False)
    return CallToolResult(content=[TextContent(type="text", text=text)])


def error_result(message: str) -> CallToolResult:
    return CallToolResult(content=[TextContent(type="text", text=message)], isError=True)


def http_error_result(response: httpx.Response) -> CallToolResult:
    """Error result for a non-2xx response: `Error: <status> - <body>`."""
    logger.warning(
        "Upstream %s %s returned %s", response.request.method, response.request.url.path, response.status_code
    )
    return error_result(f"Error: {response.status_code} - {response.text}")
