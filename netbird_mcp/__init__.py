"""
NetBird MCP Server
Model Context Protocol tools for the NetBird management API.
"""

__version__ = "0.1.0"
