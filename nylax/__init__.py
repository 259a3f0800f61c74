"""NYLAX - Nylas Access.

Namespace package containing:
- nylax.sdk: Core SDK for programmatic access to the Nylas email/calendar API
- nylax.cli: Command-line interface
- nylax.mcp: Model Context Protocol server for LLM integration
"""

__version__ = "0.3.0"
