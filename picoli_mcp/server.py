from importlib import import_module
import pkgutil
import sys

from mcp.server.fastmcp import FastMCP

from picoli_mcp import __version__
from picoli_mcp.core.config import Config, load_config
from picoli_mcp.core.logging_config import get_logger, setup_logging

logger = get_logger(__name__)

TOOLS_PACKAGE = "picoli_mcp.tools"

INSTRUCTIONS = (
    "Tools for the picoli.site URL shortener: create short links one at a time or in bulk, "
    "list existing links, and read human (bot-filtered) click statistics and analytics."
)


def register_tools(mcp: FastMCP, config: Config) -> list[str]:
    """Import every module in the tools package and register what its `get_tools(config)` returns."""
    package = import_module(TOOLS_PACKAGE)
    registered_tool_names: list[str] = []

    for _, name, _ in pkgutil.iter_modules(package.__path__):
        if name.startswith("_"):
            continue
        module_name = f"{TOOLS_PACKAGE}.{name}"
        mod = import_module(module_name)
        logger.info("Imported tools module: %s", module_name)
        if not hasattr(mod, "get_tools"):
            logger.warning("Tools module %s has no get_tools(); skipping", module_name)
            continue

        for tool_name, meta in mod.get_tools(config).items():
            mcp.add_tool(
                meta["func"],
                name=tool_name,
                title=meta.get("title"),
                description=meta.get("description"),
                annotations=meta.get("annotations"),
                structured_output=False,
            )
            logger.info("Added tool %s (title=%s) from %s", tool_name, meta.get("title"), module_name)
            registered_tool_names.append(tool_name)

    logger.info("Total tools registered: %d, tool names: %s", len(registered_tool_names), registered_tool_names)
    return registered_tool_names


def build_server(config: Config) -> FastMCP:
    mcp = FastMCP(config.server_name, instructions=INSTRUCTIONS)
    register_tools(mcp, config)
    return mcp


def main() -> None:
    config = load_config()
    setup_logging(config.log_dir, level=config.log_level)
    logger.info("%s %s starting against %s", config.server_name, __version__, config.base_url)

    try:
        mcp = build_server(config)
        logger.info("%s server running on stdio", config.server_name)
        mcp.run(transport="stdio")
        logger.info("MCP server shut down.")
    except Exception:
        logger.exception("Fatal error")
        sys.exit(1)


if __name__ == "__main__":
    main()
