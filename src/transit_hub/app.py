"""MCP application instance.

Owned here so `python -m transit_hub.server` registers tools on the same
instance it serves. Tool modules import `mcp` from this module, never from
server.py.
"""

from mcp.server.fastmcp import FastMCP

mcp = FastMCP(
    "Transit Hub Planner",
    instructions=(
        "Multi-modal route planning over taxi ranks, hubs, bus and train routes - "
        "place search, nearby hubs and stops, and step-by-step journey plans"
    ),
)
