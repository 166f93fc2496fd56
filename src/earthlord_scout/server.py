"""MCP server for earthlord-scout.

Registers all tools and runs via stdio transport.
"""

import json

from mcp.server.fastmcp import FastMCP

from .state import state
from .tools.location import register_location_tools
from .tools.pois import register_poi_tools
from .tools.territory import register_territory_tools
from .tools.export import register_export_tools
from .tools.session import register_session_tools
from .tools.status import register_status_tools

mcp = FastMCP(
    "earthlord-scout",
    instructions=(
        "Survival exploration helper: classify nearby player density, choose which POIs "
        "to show, and turn walked GPS paths into territory polygons"
    ),
)

# Register all tool groups
register_location_tools(mcp)
register_poi_tools(mcp)
register_territory_tools(mcp)
register_export_tools(mcp)
register_session_tools(mcp)
register_status_tools(mcp)


@mcp.resource("state://session")
def session_state() -> str:
    """Current session summary as JSON."""
    return json.dumps(state.summary(), indent=2)


def main():
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
