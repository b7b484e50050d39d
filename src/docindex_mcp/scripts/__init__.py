"""Command-line scripts shipped with docindex-mcp."""
