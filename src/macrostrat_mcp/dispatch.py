"""
Request router for the MCP capability protocol.

Every request kind the gateway serves goes through :class:`Dispatcher`. It
holds no per-request state, so one instance serves the whole session.
"""

import json
import logging
from functools import partial
from typing import Any

from mcp import types
from mcp.server.lowlevel.helper_types import ReadResourceContents

from .core.catalog import GatewayConfig, Root
from .core.client import MacrostratClient
from .core.errors import ValidationError
from .core.geocoding import place_to_point
from .core.validation import (
    DefsArgs,
    DefsAutocompleteArgs,
    FindColumnsArgs,
    FindMapUnitsArgs,
    FindUnitsArgs,
    LatLngToTileArgs,
    MapTilesArgs,
    MineralInfoArgs,
    TimescaleArgs,
    validate_arguments,
)
from .prompts import Geocoder, PromptContext
from .tools import (
    TileResult,
    defs,
    defs_autocomplete,
    find_columns,
    find_map_units,
    find_units,
    map_tiles,
    mineral_info,
    tile_for_point,
    timescale,
)
from .tools.map_tiles import TILE_MIME_TYPE

logger = logging.getLogger(__name__)

Content = types.TextContent | types.ImageContent


def _json_text(data: Any) -> types.TextContent:
    return types.TextContent(type="text", text=json.dumps(data, indent=2, ensure_ascii=False))


def _tile_content(result: TileResult) -> list[Content]:
    content: list[Content] = [_json_text(result.payload())]
    if result.image is not None:
        content.append(
            types.ImageContent(type="image", data=result.image_base64, mimeType=TILE_MIME_TYPE)
        )
    return content


class Dispatcher:
    """
    Route capability requests to the catalog, validator and tools.

    Parameters
    ----------
    config : GatewayConfig
        Immutable gateway configuration
    client : MacrostratClient
        Upstream HTTP client
    geocoder : callable, optional
        Blocking ``place -> (lat, lng)`` function used by prompts. Defaults to
        Nominatim via geopy.
    """

    def __init__(
        self,
        config: GatewayConfig,
        client: MacrostratClient,
        geocoder: Geocoder | None = None,
    ) -> None:
        self.config = config
        self.client = client
        self.geocoder = geocoder or partial(place_to_point, user_agent=config.user_agent)

    async def list_tools(self) -> list[types.Tool]:
        return [
            types.Tool(
                name=tool.name.value,
                description=tool.description,
                inputSchema=dict(tool.input_schema),
            )
            for tool in self.config.tools
        ]

    async def call_tool(self, name: str, arguments: dict[str, Any] | None) -> list[Content]:
        """
        Validate and run a tool.

        Parameters
        ----------
        name : str
            Tool name
        arguments : dict or None
            Raw tool arguments

        Returns
        -------
        list[TextContent | ImageContent]
            JSON text part, plus an image part for fetched map tiles

        Raises
        ------
        NotFoundError
            If the tool is not in the catalog
        ValidationError
            If the arguments are invalid
        UpstreamError
            If an entity query fails upstream
        """
        tool = self.config.get_tool(name).name
        args = validate_arguments(tool, arguments)
        logger.info("Tool %s called with %s", tool.value, args.model_dump(by_alias=True))

        match args:
            case FindColumnsArgs():
                data = await find_columns(self.client, args)
            case FindUnitsArgs():
                data = await find_units(self.client, args)
            case FindMapUnitsArgs():
                data = await find_map_units(self.client, args)
            case DefsArgs():
                data = await defs(self.client, args)
            case DefsAutocompleteArgs():
                data = await defs_autocomplete(self.client, args)
            case MineralInfoArgs():
                data = await mineral_info(self.client, args)
            case TimescaleArgs():
                data = await timescale(self.client, args)
            case LatLngToTileArgs():
                data = tile_for_point(args)
            case MapTilesArgs():
                return _tile_content(await map_tiles(self.client, args))
            case _:
                raise TypeError(f"No handler for {type(args).__name__}")

        return [_json_text(data)]

    async def list_prompts(self) -> list[types.Prompt]:
        return [
            types.Prompt(
                name=prompt.name,
                description=prompt.description,
                arguments=[
                    types.PromptArgument(
                        name=arg.name,
                        description=arg.description,
                        required=arg.required,
                    )
                    for arg in prompt.arguments
                ],
            )
            for prompt in self.config.prompts
        ]

    async def get_prompt(
        self, name: str, arguments: dict[str, str] | None
    ) -> types.GetPromptResult:
        """
        Render a prompt template.

        Parameters
        ----------
        name : str
            Prompt name
        arguments : dict or None
            Prompt arguments

        Returns
        -------
        GetPromptResult
            A single user message with the rendered text

        Raises
        ------
        NotFoundError
            If the prompt is unknown
        ValidationError
            If a required argument is missing
        """
        prompt = self.config.get_prompt(name)
        supplied = arguments or {}
        values: dict[str, str] = {}
        for arg in prompt.arguments:
            value = supplied.get(arg.name)
            if value is None or not str(value).strip():
                if arg.required:
                    raise ValidationError(arg.name, "required prompt argument is missing")
                if arg.default is None:
                    continue
                value = arg.default
            values[arg.name] = str(value).strip()

        text = await prompt.render(values, PromptContext(self.client, self.geocoder))
        return types.GetPromptResult(
            description=prompt.description,
            messages=[
                types.PromptMessage(
                    role="user",
                    content=types.TextContent(type="text", text=text),
                )
            ],
        )

    async def list_resources(self) -> list[types.Resource]:
        return [
            types.Resource(
                uri=resource.uri,
                name=resource.name,
                description=resource.description,
                mimeType=resource.mime_type,
            )
            for resource in self.config.resources
        ]

    async def read_resource(self, uri: str) -> list[ReadResourceContents]:
        resource = self.config.get_resource(str(uri))
        text = json.dumps(dict(resource.schema), indent=2)
        return [ReadResourceContents(content=text, mime_type=resource.mime_type)]

    async def list_roots(self) -> list[Root]:
        return list(self.config.roots)
