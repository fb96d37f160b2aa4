"""picoli-mcp: MCP tools for the picoli.site URL shortener."""

__version__ = "1.0.0"
