from typing import Annotated, Any, Optional
import logging

from mcp.types import CallToolResult, ToolAnnotations
from pydantic import Field

from picoli_mcp.core.config import Config
from picoli_mcp.core.models import MAX_BATCH, DateString
from picoli_mcp.utils import get_endpoint, http_error_result, json_result, picoli_request, short_url

logger = logging.getLogger(__name__)

READ_ONLY = ToolAnnotations(readOnlyHint=True, idempotentHint=True)


def get_tools(config: Config) -> dict[str, Any]:
    async def get_link_stats(
        slugs: Annotated[
            list[str],
            Field(
                min_length=1,
                max_length=MAX_BATCH,
                description="Array of slugs to get stats for (e.g. ['my-link', 'abc123'])",
            ),
        ],
    ) -> CallToolResult:
        """Human click counts per slug; requested slugs missing upstream are listed under notFound."""
        response = await picoli_request(
            config, get_endpoint(config, "stats_batch"), method="POST", body={"slugs": slugs}
        )
        if not response.is_success:
            return http_error_result(response)

        data = response.json()
        stats = [
            {
                "slug": entry["slug"],
                "shortUrl": short_url(config, entry["slug"]),
                "destinationUrl": entry.get("destination_url"),
                "clicks": entry.get("human_clicks"),
                "createdAt": entry.get("created_at"),
            }
            for entry in data.get("stats") or []
        ]

        found = {entry["slug"] for entry in stats}
        result: dict[str, Any] = {"stats": stats}
        not_found = [slug for slug in slugs if slug not in found]
        if not_found:
            logger.info("No stats for %d of %d slugs", len(not_found), len(slugs))
            result["notFound"] = not_found
        return json_result(result)

    async def get_analytics(
        start_date: Annotated[
            Optional[DateString],
            Field(description="Start date in YYYY-MM-DD format (default: 7 days ago)"),
        ] = None,
        end_date: Annotated[
            Optional[DateString],
            Field(description="End date in YYYY-MM-DD format (default: today)"),
        ] = None,
    ) -> CallToolResult:
        path = get_endpoint(config, "stats", {"start_date": start_date, "end_date": end_date})
        response = await picoli_request(config, path)
        if not response.is_success:
            return http_error_result(response)

        data = response.json()
        return json_result(
            {
                "dateRange": data.get("date_filter"),
                "totalLinks": data.get("total_links"),
                "top10": [
                    {
                        "shortUrl": short_url(config, item["slug"]),
                        "slug": item["slug"],
                        "clicks": item.get("human_clicks"),
                    }
                    for item in data.get("top_10") or []
                ],
                "dailyStats": data.get("daily_stats") or [],
            }
        )

    return {
        "get_link_stats": {
            "func": get_link_stats,
            "title": "Get Link Stats",
            "description": "Get click statistics for one or more short links by their slugs. "
            "Returns human click counts (bot traffic excluded).",
            "annotations": READ_ONLY,
        },
        "get_analytics": {
            "func": get_analytics,
            "title": "Get Analytics",
            "description": "Get analytics overview: top 10 links by clicks, daily click stats, and total link count. "
            "Defaults to last 7 days.",
            "annotations": READ_ONLY,
        },
    }
