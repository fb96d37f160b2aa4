# tools package for the picoli MCP server
# Modules in this package expose `get_tools(config: Config) -> dict[str, dict]`, mapping a tool name to
# {"func": async callable, "title": str, "description": str, "annotations": ToolAnnotations | None}.
# server.py imports every module here and registers the returned callables as MCP tools.
__all__ = []
