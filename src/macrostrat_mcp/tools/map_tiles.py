"""
Map tile tools: coordinate projection and tile retrieval from the Macrostrat
tile server.
"""

import base64
import io
import logging
from dataclasses import dataclass
from typing import Any

from PIL import Image, UnidentifiedImageError

from ..core.client import MacrostratClient
from ..core.errors import ImageFetchError, UpstreamError
from ..core.tiles import TileCoordinate, lat_lng_to_tile, tile_url
from ..core.validation import LatLngToTileArgs, MapTilesArgs

logger = logging.getLogger(__name__)

TILE_MIME_TYPE = "image/png"


def tile_for_point(args: LatLngToTileArgs) -> dict[str, Any]:
    """
    Tile coordinates for a point, echoing the inputs.

    Parameters
    ----------
    args : LatLngToTileArgs
        Validated arguments

    Returns
    -------
    dict
        x, y, z plus the original lat, lng and zoom
    """
    tile = lat_lng_to_tile(args.lat, args.lng, args.zoom)
    return {
        "x": tile.x,
        "y": tile.y,
        "z": tile.z,
        "lat": args.lat,
        "lng": args.lng,
        "zoom": args.zoom,
        "note": "Use these x,y coordinates with the map-tiles tool",
    }


@dataclass(frozen=True)
class TileResult:
    """
    Outcome of a map-tiles call.

    Either ``image`` holds the PNG bytes, or ``error`` explains why the image
    could not be retrieved. The metadata is valid in both cases.
    """

    metadata: dict[str, Any]
    image: bytes | None = None
    error: str | None = None

    @property
    def image_base64(self) -> str | None:
        if self.image is None:
            return None
        return base64.b64encode(self.image).decode("ascii")

    def payload(self) -> dict[str, Any]:
        """Metadata as sent to the client, annotated with the error if any."""
        if self.error is None:
            return self.metadata
        return {**self.metadata, "error": self.error}


def _inspect_png(url: str, data: bytes) -> tuple[int, int]:
    if not data:
        raise ImageFetchError(url, "tile server returned an empty body")
    try:
        with Image.open(io.BytesIO(data)) as img:
            if img.format != "PNG":
                raise ImageFetchError(url, f"expected a PNG tile, got {img.format}")
            # open() only parses the header; load() decodes the pixel data
            img.load()
            return img.size
    except UnidentifiedImageError as exc:
        raise ImageFetchError(url, "tile body is not a decodable image") from exc
    except Image.DecompressionBombError as exc:
        raise ImageFetchError(url, f"tile is implausibly large ({exc})") from exc
    except (OSError, SyntaxError) as exc:
        raise ImageFetchError(url, f"tile image is corrupt ({exc})") from exc


async def fetch_tile_image(client: MacrostratClient, url: str) -> tuple[bytes, tuple[int, int]]:
    """
    Download a PNG tile and check that it decodes.

    Parameters
    ----------
    client : MacrostratClient
        Upstream client
    url : str
        Tile URL

    Returns
    -------
    tuple[bytes, tuple[int, int]]
        Raw PNG bytes and the image (width, height)

    Raises
    ------
    ImageFetchError
        If the request fails or the body is not a PNG image
    """
    try:
        data = await client.get_bytes(url)
    except UpstreamError as exc:
        if exc.status_code is None:
            raise ImageFetchError(url, exc.status_text) from exc
        raise ImageFetchError(url, f"HTTP {exc.status_code}: {exc.status_text}") from exc
    return data, _inspect_png(url, data)


async def map_tiles(client: MacrostratClient, args: MapTilesArgs) -> TileResult:
    """
    Build the tile URL and, when asked for a PNG, fetch the image.

    A failed image fetch does not fail the call: the URL is still returned,
    with an ``error`` annotation.

    Parameters
    ----------
    client : MacrostratClient
        Upstream client
    args : MapTilesArgs
        Validated arguments

    Returns
    -------
    TileResult
        Metadata plus the image or the fetch error
    """
    tile = TileCoordinate(x=args.x, y=args.y, z=args.z)
    url = tile_url(client.endpoint("tiles"), args.scale, tile, args.format)
    metadata: dict[str, Any] = {
        "url": url,
        "scale": args.scale,
        "z": tile.z,
        "x": tile.x,
        "y": tile.y,
        "format": args.format,
        "info": client.config.tile_info.describe(args.scale),
    }

    if not (args.fetch_image and args.format == "png"):
        return TileResult(metadata=metadata)

    try:
        image, (width, height) = await fetch_tile_image(client, url)
    except ImageFetchError as exc:
        logger.warning("Error fetching tile image %s: %s", url, exc.reason)
        return TileResult(metadata=metadata, error=f"Failed to fetch image: {exc.reason}")

    metadata["info"] = {
        **metadata["info"],
        "width": width,
        "height": height,
        "note": "Geological map tile image provided below for visual analysis",
    }
    return TileResult(metadata=metadata, image=image)
