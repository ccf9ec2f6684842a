"""
Macrostrat MCP Server.

A Model Context Protocol (MCP) server for querying the Macrostrat
geology database: stratigraphic columns, units, geologic maps and
definitions.
"""

from macrostrat_mcp import core, tools

__all__ = ["core", "tools"]
