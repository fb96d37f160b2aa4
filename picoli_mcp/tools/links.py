from typing import Annotated, Any, Optional
import logging

from mcp.types import CallToolResult, ToolAnnotations
from pydantic import Field, StrictInt

from picoli_mcp.core.config import Config
from picoli_mcp.core.models import MAX_BATCH, AbsoluteUrl, LinkInput
from picoli_mcp.utils import get_endpoint, http_error_result, error_result, json_result, picoli_request, short_url

logger = logging.getLogger(__name__)


def get_tools(config: Config) -> dict[str, Any]:
    async def shorten_url(
        url: Annotated[AbsoluteUrl, Field(description="The destination URL to shorten")],
        slug: Annotated[
            Optional[str],
            Field(description="Optional custom slug (e.g. 'my-link'). If not provided, a random slug is generated."),
        ] = None,
    ) -> CallToolResult:
        """Create one short link through the bulk endpoint."""
        link = {"url": url}
        if slug:
            link["slug"] = slug

        logger.info("Shortening %s", url)
        response = await picoli_request(
            config, get_endpoint(config, "links_bulk"), method="POST", body={"links": [link]}
        )
        if not response.is_success:
            return http_error_result(response)

        data = response.json()
        errors = data.get("errors") or []
        if errors:
            logger.warning("Upstream rejected link for %s: %s", url, errors[0])
            return error_result(f"Error: {errors[0].get('error')}")

        created = data["links"][0]
        return json_result(
            {
                "shortUrl": short_url(config, created["slug"]),
                "slug": created["slug"],
                "destinationUrl": created.get("destination_url"),
                "createdAt": created.get("created_at"),
            }
        )

    async def shorten_urls(
        links: Annotated[
            list[LinkInput],
            Field(min_length=1, max_length=MAX_BATCH, description="Array of URLs to shorten"),
        ],
    ) -> CallToolResult:
        """Create many short links in one request; per-link failures are reported inline."""
        logger.info("Shortening %d URLs", len(links))
        response = await picoli_request(
            config,
            get_endpoint(config, "links_bulk"),
            method="POST",
            body={"links": [link.to_payload() for link in links]},
        )
        if not response.is_success:
            return http_error_result(response)

        data = response.json()
        errors = data.get("errors") or []
        summary: dict[str, Any] = {
            "created": data.get("created"),
            "errors": len(errors),
            "links": [
                {
                    "shortUrl": short_url(config, item["slug"]),
                    "slug": item["slug"],
                    "destinationUrl": item.get("destination_url"),
                }
                for item in data.get("links") or []
            ],
        }
        if errors:
            summary["errorDetails"] = errors
        return json_result(summary)

    async def list_links(
        page: Annotated[StrictInt, Field(gt=0, description="Page number (default: 1)")] = 1,
        limit: Annotated[StrictInt, Field(ge=1, le=100, description="Items per page (default: 20, max: 100)")] = 20,
    ) -> CallToolResult:
        response = await picoli_request(config, get_endpoint(config, "links", {"page": page, "limit": limit}))
        if not response.is_success:
            return http_error_result(response)

        data = response.json()
        links = [
            {
                "shortUrl": short_url(config, item["slug"]),
                "slug": item["slug"],
                "destinationUrl": item.get("destination_url"),
                "clicks": item.get("clicks"),
                "createdAt": item.get("created_at"),
            }
            for item in data.get("data") or []
        ]
        return json_result({"links": links, "pagination": data.get("pagination")})

    return {
        "shorten_url": {
            "func": shorten_url,
            "title": "Shorten URL",
            "description": "Create a short URL using picoli.site. Optionally specify a custom slug. "
            "Returns the shortened URL and slug.",
        },
        "shorten_urls": {
            "func": shorten_urls,
            "title": "Shorten Multiple URLs",
            "description": "Create multiple short URLs at once (up to 500). Each URL can have an optional custom slug.",
        },
        "list_links": {
            "func": list_links,
            "title": "List Links",
            "description": "List all shortened URLs with their click counts. Supports pagination.",
            "annotations": ToolAnnotations(readOnlyHint=True, idempotentHint=True),
        },
    }
