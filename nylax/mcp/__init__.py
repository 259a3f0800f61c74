"""NYLAX MCP - Model Context Protocol server for Nylas Access.

This module provides an MCP server that exposes NYLAX functionality
to LLM clients.
"""

from .server import mcp, run_server

__all__ = ["mcp", "run_server"]
