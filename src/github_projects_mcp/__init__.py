"""github-projects-mcp: GitHub Projects V2 tools over MCP."""

__version__ = "0.1.0"
