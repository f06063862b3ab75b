"""MCP server and output formatters."""
