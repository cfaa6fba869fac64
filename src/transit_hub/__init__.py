"""Hub-based multi-modal route planning served over MCP."""

__version__ = "0.1.0"
