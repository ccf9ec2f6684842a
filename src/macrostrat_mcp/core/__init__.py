"""
Core utilities for the Macrostrat MCP server.
"""

from macrostrat_mcp.core.catalog import (
    ROOT_ROLES,
    ROOTS,
    GatewayConfig,
    PromptArgument,
    PromptDescriptor,
    Root,
    TileInfo,
    ToolDescriptor,
    build_tools,
)
from macrostrat_mcp.core.client import MacrostratClient, format_query_value
from macrostrat_mcp.core.errors import (
    GatewayError,
    ImageFetchError,
    NotFoundError,
    UpstreamError,
    ValidationError,
)
from macrostrat_mcp.core.geocoding import parse_coordinates, place_to_point
from macrostrat_mcp.core.schemas import API_SCHEMAS, ResourceDescriptor, build_resources
from macrostrat_mcp.core.summary import age_range, describe_unit, summarize_units
from macrostrat_mcp.core.tiles import TileCoordinate, lat_lng_to_tile, project, tile_url
from macrostrat_mcp.core.validation import ToolName, validate_arguments

__all__ = [
    "API_SCHEMAS",
    "ROOTS",
    "ROOT_ROLES",
    "GatewayConfig",
    "GatewayError",
    "ImageFetchError",
    "MacrostratClient",
    "NotFoundError",
    "PromptArgument",
    "PromptDescriptor",
    "ResourceDescriptor",
    "Root",
    "TileCoordinate",
    "TileInfo",
    "ToolDescriptor",
    "ToolName",
    "UpstreamError",
    "ValidationError",
    "age_range",
    "build_resources",
    "build_tools",
    "describe_unit",
    "format_query_value",
    "lat_lng_to_tile",
    "parse_coordinates",
    "place_to_point",
    "project",
    "summarize_units",
    "tile_url",
    "validate_arguments",
]
