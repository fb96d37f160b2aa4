from typing import Any, Mapping, Optional
from urllib.parse import urlencode

from picoli_mcp.core.config import Config


def get_endpoint(config: Config, key: str, params: Optional[Mapping[str, Any]] = None) -> str:
    """Return the API path for `key`, with `params` appended as a query string.

    Parameters whose value is None are left out.
    """
    path = getattr(config.api_paths, key, None)
    if not path:
        raise KeyError(f"Missing API path for key '{key}'")

    query = urlencode({k: v for k, v in (params or {}).items() if v is not None})
    return f"{path}?{query}" if query else path
