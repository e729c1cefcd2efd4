"""
Main entry point for running the NetBird MCP Server as a Python module.
"""

from .server import main

if __name__ == "__main__":
    main()
