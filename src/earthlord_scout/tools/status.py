"""Status tool: get_status."""

import json
from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations

from ..state import state


def register_status_tools(mcp: FastMCP):

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=True))
    def get_status() -> str:
        """Return a summary of the current session state.

        Shows location, density, POI catalog and selection, the recorded path
        and whether a territory has been built and validated.
        """
        return json.dumps(state.summary(), indent=2)
