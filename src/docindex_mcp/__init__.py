"""docindex-mcp: compact API documentation search index exposed over MCP."""

__version__ = "0.1.0"
