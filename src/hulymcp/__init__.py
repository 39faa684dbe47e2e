"""hulymcp - MCP server exposing a Huly workspace to AI agents.

Tools are grouped by category (projects, issues, contacts, documents,
workspace) and can be enabled selectively with TOOLSETS.

Run:
    $ HULY_URL=https://huly.app HULY_TOKEN=... HULY_WORKSPACE=acme huly-mcp
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
