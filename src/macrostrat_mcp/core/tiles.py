"""
Web-mercator tile math.
"""

import math
from typing import NamedTuple

# Latitude at which the square web-mercator world ends
MAX_MERCATOR_LAT = 85.0511287798


class TileCoordinate(NamedTuple):
    """Tile address in the XYZ pyramid (origin top-left)."""

    x: int
    y: int
    z: int


def project(lat: float, lng: float, zoom: int) -> tuple[int, int]:
    """
    Convert geographic coordinates to tile indices.

    Uses the spherical web-mercator formula shared by slippy maps and MapKit.
    Latitudes beyond the mercator limit and ``lng == 180`` are clamped onto the
    edge tiles, so the result is always a valid tile.

    Parameters
    ----------
    lat : float
        Latitude in decimal degrees
    lng : float
        Longitude in decimal degrees
    zoom : int
        Zoom level

    Returns
    -------
    tuple[int, int]
        ``(x, y)`` with ``0 <= x, y < 2**zoom``
    """
    n = 1 << zoom
    lat = max(-MAX_MERCATOR_LAT, min(MAX_MERCATOR_LAT, lat))
    lat_rad = lat * math.pi / 180.0

    x = math.floor((lng + 180.0) / 360.0 * n)
    y = math.floor(
        (1.0 - math.log(math.tan(lat_rad) + 1.0 / math.cos(lat_rad)) / math.pi) / 2.0 * n
    )

    return min(max(x, 0), n - 1), min(max(y, 0), n - 1)


def lat_lng_to_tile(lat: float, lng: float, zoom: int) -> TileCoordinate:
    """
    Project a point and return the full tile address.

    Parameters
    ----------
    lat : float
        Latitude in decimal degrees
    lng : float
        Longitude in decimal degrees
    zoom : int
        Zoom level

    Returns
    -------
    TileCoordinate
        Tile containing the point at ``zoom``
    """
    x, y = project(lat, lng, zoom)
    return TileCoordinate(x=x, y=y, z=zoom)


def tile_url(tiles_root: str, scale: str, tile: TileCoordinate, fmt: str) -> str:
    """Build the tile server URL for ``tile``."""
    return f"{tiles_root.rstrip('/')}/{scale}/{tile.z}/{tile.x}/{tile.y}.{fmt}"
