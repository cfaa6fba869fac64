"""MCP tools; importing this package registers them on the server."""

from transit_hub.tools import geocoding_tools, nearby_tools, plan_tools

__all__ = ["geocoding_tools", "nearby_tools", "plan_tools"]
