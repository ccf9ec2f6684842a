"""
Prompt templates served by the gateway.

The geologic-history and bedrock prompts look the location up and append a
digest of the units found there. Lookups that fail never fail the prompt: the
digest is replaced by an apology and the instructions are still returned.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, get_args

from .core.catalog import PromptArgument, PromptDescriptor
from .core.client import MacrostratClient
from .core.errors import ValidationError
from .core.summary import summarize_units
from .core.validation import MAX_ZOOM, FindMapUnitsArgs, FindUnitsArgs, TileScale
from .tools.units import find_map_units, find_units

logger = logging.getLogger(__name__)

Geocoder = Callable[[str], tuple[float, float]]


@dataclass(frozen=True)
class PromptContext:
    """What a prompt renderer may use to fetch data."""

    client: MacrostratClient
    geocoder: Geocoder


async def _digest(
    context: PromptContext,
    location: str,
    fetch: Callable[[float, float], Awaitable[list[dict[str, Any]]]],
    describe: Callable[[list[dict[str, Any]]], str],
) -> str:
    try:
        lat, lng = await asyncio.to_thread(context.geocoder, location)
        units = await fetch(lat, lng)
        return describe(units)
    except Exception as exc:
        logger.warning("Could not load Macrostrat data for %r: %s", location, exc)
        return (
            f"Sorry, I could not retrieve Macrostrat data for {location} ({exc}). "
            "Please query the tools directly."
        )


async def render_geologic_history(arguments: dict[str, str], context: PromptContext) -> str:
    location = arguments["location"]

    async def fetch(lat: float, lng: float) -> list[dict[str, Any]]:
        return await find_units(
            context.client, FindUnitsArgs(lat=lat, lng=lng, response_type="long")
        )

    digest = await _digest(
        context, location, fetch, lambda units: summarize_units(units, location)
    )
    return (
        f"Generate a comprehensive geologic history for the location: {location}. "
        "Use the Macrostrat API to find columns and units in the area. "
        "Use long responses to get detailed information.\n\n"
        f"{digest}"
    )


def _with_sources(units: list[dict[str, Any]], location: str) -> str:
    text = summarize_units(units, location)
    sources = list(dict.fromkeys(u["references"] for u in units if u.get("references")))
    if sources:
        text += "\nMap sources:\n" + "\n".join(f"- {source}" for source in sources)
    return text


async def render_bedrock(arguments: dict[str, str], context: PromptContext) -> str:
    location = arguments["location"]

    async def fetch(lat: float, lng: float) -> list[dict[str, Any]]:
        return await find_map_units(
            context.client, FindMapUnitsArgs(lat=lat, lng=lng, response_type="long")
        )

    digest = await _digest(context, location, fetch, lambda units: _with_sources(units, location))
    return (
        f"Get information about bedrock geology for the location {location} by using "
        "the Macrostrat API to find the upper most units in the area. "
        "Use long responses to get detailed information.\n\n"
        f"{digest}"
    )


async def render_geologic_map(arguments: dict[str, str], context: PromptContext) -> str:
    location = arguments["location"]
    zoom_level = arguments.get("zoom_level") or "10"
    scale = arguments.get("scale") or "carto"

    if not (zoom_level.isascii() and zoom_level.isdigit()) or int(zoom_level) > MAX_ZOOM:
        raise ValidationError("zoom_level", f"must be an integer between 0 and {MAX_ZOOM}")
    if scale not in get_args(TileScale):
        raise ValidationError("scale", f"must be one of {', '.join(get_args(TileScale))}")

    return f"""Create a geologic map visualization for {location}.

Step 1: Convert the location to precise latitude/longitude coordinates.

Step 2: Use the lat-lng-to-tile tool to convert the coordinates to tile coordinates (x, y) for zoom level {zoom_level}.

Step 3: Use the map-tiles tool with the calculated x, y coordinates and zoom level {zoom_level}, using "{scale}" scale. Set fetch_image=true to retrieve the actual tile image for visual analysis.

Step 4: Analyze the geological map tile image to identify:
- Rock unit colors and patterns
- Geological formations and structures
- Fault lines and other linear features
- Age relationships between units

Step 5: Consider getting adjacent tiles (x±1, y±1) with fetch_image=true to show a broader geological context.

Step 6: Provide both the tile URLs and detailed analysis of the geological features visible in the map images."""


def build_prompts() -> tuple[PromptDescriptor, ...]:
    """
    Build the prompt descriptors, in listing order.

    Returns
    -------
    tuple[PromptDescriptor, ...]
        geologic-history, bedrock and geologic-map
    """
    return (
        PromptDescriptor(
            name="geologic-history",
            description="Get the geologic history of a location",
            arguments=(
                PromptArgument(
                    name="location",
                    description=(
                        "The location to get the geologic history of "
                        "(place name or 'lat, lng')"
                    ),
                    required=True,
                ),
            ),
            render=render_geologic_history,
        ),
        PromptDescriptor(
            name="bedrock",
            description="Get information about bedrock geology",
            arguments=(
                PromptArgument(
                    name="location",
                    description=(
                        "The location to get the bedrock information of "
                        "(place name or 'lat, lng')"
                    ),
                    required=True,
                ),
            ),
            render=render_bedrock,
        ),
        PromptDescriptor(
            name="geologic-map",
            description="Generate map tiles for visualizing geology of an area",
            arguments=(
                PromptArgument(
                    name="location",
                    description="The location to create a geologic map for",
                    required=True,
                ),
                PromptArgument(
                    name="zoom_level",
                    description="Zoom level for the map (0-18, higher = more detailed)",
                    default="10",
                ),
                PromptArgument(
                    name="scale",
                    description=(
                        "Map scale: carto (adapts to zoom), tiny, small (most coverage), "
                        "medium (balanced), large (most detail)"
                    ),
                    default="carto",
                ),
            ),
            render=render_geologic_map,
        ),
    )
