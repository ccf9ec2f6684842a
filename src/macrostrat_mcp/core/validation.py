"""
Typed tool arguments and the validator that produces them.

Raw argument mappings never travel past :func:`validate_arguments`; the rest of
the gateway only sees the models defined here.
"""

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic import ValidationError as PydanticValidationError

from .errors import NotFoundError, ValidationError

MAX_ZOOM = 18

ResponseType = Literal["long", "short"]
DefsEndpoint = Literal[
    "lithologies",
    "structures",
    "columns",
    "econs",
    "minerals",
    "timescales",
    "environments",
    "strat_names",
    "measurements",
    "intervals",
]
TileScale = Literal["carto", "tiny", "small", "medium", "large"]
TileFormat = Literal["mvt", "png"]


class ToolName(str, Enum):
    """Closed set of tool names served by the gateway."""

    FIND_COLUMNS = "find-columns"
    FIND_UNITS = "find-units"
    FIND_MAP_UNITS = "find-map-units"
    DEFS = "defs"
    DEFS_AUTOCOMPLETE = "defs-autocomplete"
    MINERAL_INFO = "mineral-info"
    TIMESCALE = "timescale"
    LAT_LNG_TO_TILE = "lat-lng-to-tile"
    MAP_TILES = "map-tiles"

    @classmethod
    def parse(cls, name: str) -> "ToolName":
        """
        Resolve a tool name, raising NotFoundError for unknown names.

        Parameters
        ----------
        name : str
            Tool name as sent by the client

        Returns
        -------
        ToolName
            Matching enum member
        """
        try:
            return cls(name)
        except ValueError:
            raise NotFoundError("tool", name) from None


class ToolArguments(BaseModel):
    """Base for all tool argument models."""

    model_config = ConfigDict(
        strict=True,
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )


def _latitude(description: str = "A valid latitude in decimal degrees") -> Any:
    return Field(description=description, ge=-90, le=90, allow_inf_nan=False)


def _longitude(description: str = "A valid longitude in decimal degrees") -> Any:
    return Field(description=description, ge=-180, le=180, allow_inf_nan=False)


class FindColumnsArgs(ToolArguments):
    lat: float = _latitude()
    lng: float = _longitude()
    adjacents: bool = Field(False, description="Include adjacent columns")
    response_type: ResponseType = Field(
        "long",
        alias="responseType",
        description="The length of response long or short",
    )


class FindUnitsArgs(ToolArguments):
    lat: float = _latitude()
    lng: float = _longitude()
    response_type: ResponseType = Field(
        "long",
        alias="responseType",
        description="The length of response long or short. Long provides lots of good details",
    )
    age: float | None = Field(
        None,
        ge=0,
        allow_inf_nan=False,
        description="Only return units spanning this age, in Myr before present",
    )


class FindMapUnitsArgs(ToolArguments):
    lat: float = _latitude()
    lng: float = _longitude()
    response_type: ResponseType = Field(
        "long",
        alias="responseType",
        description="The length of response long or short",
    )


class DefsArgs(ToolArguments):
    endpoint: DefsEndpoint = Field(description="The endpoint to query")
    parameters: str = Field(
        description="parameters to pass to the endpoint, as a query string (e.g. 'mineral=quartz')"
    )


class DefsAutocompleteArgs(ToolArguments):
    query: str = Field(min_length=1, description="the search term")


class MineralInfoArgs(ToolArguments):
    mineral: str | None = Field(None, description="The name of the mineral")
    mineral_type: str | None = Field(None, description="The type of mineral")
    element: str | None = Field(None, description="An element that the mineral is made of")


class TimescaleArgs(ToolArguments):
    age: float = Field(
        ge=0,
        allow_inf_nan=False,
        description="Age in Myr before present",
    )


class LatLngToTileArgs(ToolArguments):
    lat: float = _latitude("Latitude in decimal degrees (-90 to 90)")
    lng: float = _longitude("Longitude in decimal degrees (-180 to 180)")
    zoom: int = Field(ge=0, le=MAX_ZOOM, description="Zoom level (0-18)")


class MapTilesArgs(ToolArguments):
    scale: TileScale = Field(
        "carto",
        description=(
            "Map scale layer - 'carto' automatically selects appropriate detail level "
            "based on zoom. Other scales (tiny, small, medium, large) may have limited "
            "coverage."
        ),
    )
    z: int = Field(
        ge=0,
        le=MAX_ZOOM,
        description=(
            "Zoom level (0-18). Higher zoom = more detailed view of smaller area. "
            "Typical values: z=3 (continent), z=6 (country), z=10 (city), "
            "z=15 (neighborhood)"
        ),
    )
    x: int = Field(
        ge=0,
        description="Tile X coordinate - use lat-lng-to-tile tool to calculate this from lat/lng",
    )
    y: int = Field(
        ge=0,
        description="Tile Y coordinate - use lat-lng-to-tile tool to calculate this from lat/lng",
    )
    format: TileFormat = Field(
        "png", description="Tile format: 'png' for images, 'mvt' for vector tiles"
    )
    fetch_image: bool = Field(
        False,
        description=(
            "If true, actually fetch the tile image data so the geological features "
            "can be analyzed visually"
        ),
    )

    @field_validator("x", "y")
    @classmethod
    def _within_grid(cls, value: int, info: ValidationInfo) -> int:
        z = info.data.get("z")
        if z is not None and value >= 2**z:
            raise ValueError(f"must be less than {2**z} at zoom {z}")
        return value


TOOL_ARGUMENT_MODELS: dict[ToolName, type[ToolArguments]] = {
    ToolName.FIND_COLUMNS: FindColumnsArgs,
    ToolName.FIND_UNITS: FindUnitsArgs,
    ToolName.FIND_MAP_UNITS: FindMapUnitsArgs,
    ToolName.DEFS: DefsArgs,
    ToolName.DEFS_AUTOCOMPLETE: DefsAutocompleteArgs,
    ToolName.MINERAL_INFO: MineralInfoArgs,
    ToolName.TIMESCALE: TimescaleArgs,
    ToolName.LAT_LNG_TO_TILE: LatLngToTileArgs,
    ToolName.MAP_TILES: MapTilesArgs,
}


def input_schema(tool: ToolName) -> dict[str, Any]:
    """
    JSON schema advertised for a tool's arguments.

    Parameters
    ----------
    tool : ToolName
        Tool to describe

    Returns
    -------
    dict[str, Any]
        JSON schema of the argument object, using the wire (alias) names
    """
    schema = TOOL_ARGUMENT_MODELS[tool].model_json_schema(by_alias=True)
    schema.pop("title", None)
    for prop in schema.get("properties", {}).values():
        prop.pop("title", None)
    return schema


def validate_arguments(tool: ToolName, arguments: dict[str, Any] | None) -> ToolArguments:
    """
    Check a raw argument mapping and return the typed arguments for ``tool``.

    Parameters
    ----------
    tool : ToolName
        Tool being called
    arguments : dict[str, Any] or None
        Arguments as received from the client

    Returns
    -------
    ToolArguments
        Instance of the tool's argument model

    Raises
    ------
    ValidationError
        If an argument is missing, has the wrong type, or is out of range
    """
    model = TOOL_ARGUMENT_MODELS[tool]
    try:
        return model.model_validate(arguments or {})
    except PydanticValidationError as exc:
        error = exc.errors()[0]
        field = ".".join(str(part) for part in error["loc"]) or tool.value
        raise ValidationError(field, error["msg"]) from None
