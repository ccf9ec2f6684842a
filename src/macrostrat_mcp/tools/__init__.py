"""
Tool implementations: one coroutine per Macrostrat tool.
"""

from macrostrat_mcp.tools.defs import defs, defs_autocomplete, mineral_info, timescale
from macrostrat_mcp.tools.map_tiles import TileResult, map_tiles, tile_for_point
from macrostrat_mcp.tools.units import (
    find_columns,
    find_map_units,
    find_units,
    merge_references,
)

__all__ = [
    "TileResult",
    "defs",
    "defs_autocomplete",
    "find_columns",
    "find_map_units",
    "find_units",
    "map_tiles",
    "merge_references",
    "mineral_info",
    "tile_for_point",
    "timescale",
]
