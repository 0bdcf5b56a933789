"""
Weekly availability engine with an MCP server front end.
"""

__version__ = "0.1.0"
