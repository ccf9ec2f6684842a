"""
Capability catalog: roots, tool and prompt descriptors, and the gateway
configuration that holds them.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Literal

from .errors import NotFoundError
from .schemas import ResourceDescriptor
from .validation import ToolName, input_schema

RootRole = Literal["base", "units", "map-units", "columns", "defs", "tiles"]


@dataclass(frozen=True)
class Root:
    """An upstream endpoint the gateway is configured to use."""

    uri: str
    name: str
    description: str
    kind: str = "api"

    def to_dict(self) -> dict[str, str]:
        return {
            "type": self.kind,
            "uri": self.uri,
            "name": self.name,
            "description": self.description,
        }


ROOTS: tuple[Root, ...] = (
    Root(
        uri="https://macrostrat.org/api",
        name="Macrostrat API",
        description="Main Macrostrat API endpoint",
    ),
    Root(
        uri="https://macrostrat.org/api/geologic_units/map",
        name="Macrostrat Map Units API",
        description="Endpoint for querying geologic map units",
    ),
    Root(
        uri="https://macrostrat.org/api/units",
        name="Macrostrat Units API",
        description="Endpoint for querying geologic units",
    ),
    Root(
        uri="https://macrostrat.org/api/columns",
        name="Macrostrat Columns API",
        description="Endpoint for querying stratigraphic columns",
    ),
    Root(
        uri="https://macrostrat.org/api/defs",
        name="Macrostrat Definitions API",
        description="Endpoint for querying definitions and dictionaries",
    ),
    Root(
        uri="https://tiles.macrostrat.org",
        name="Macrostrat Tiles API",
        description="Endpoint for querying map tiles with geologic data",
    ),
)

ROOT_ROLES: dict[str, str] = {
    "base": "https://macrostrat.org/api",
    "units": "https://macrostrat.org/api/units",
    "map-units": "https://macrostrat.org/api/geologic_units/map",
    "columns": "https://macrostrat.org/api/columns",
    "defs": "https://macrostrat.org/api/defs",
    "tiles": "https://tiles.macrostrat.org",
}


@dataclass(frozen=True)
class ToolDescriptor:
    """A callable tool as advertised to clients."""

    name: ToolName
    description: str
    input_schema: MappingProxyType


TOOL_DESCRIPTIONS: dict[ToolName, str] = {
    ToolName.FIND_COLUMNS: "Query Macrostrat stratigraphic columns",
    ToolName.FIND_UNITS: "Query Macrostrat geologic units",
    ToolName.FIND_MAP_UNITS: (
        "Query geologic map units at a point, with the citation of each map source "
        "merged into the unit as 'references'"
    ),
    ToolName.DEFS: (
        "Routes giving access to standard fields and dictionaries used in Macrostrat"
    ),
    ToolName.DEFS_AUTOCOMPLETE: (
        "Quickly retrieve all definitions matching a query. Limited to 100 results"
    ),
    ToolName.MINERAL_INFO: "Get information about a mineral, use one property",
    ToolName.TIMESCALE: "Get information about a time period",
    ToolName.LAT_LNG_TO_TILE: (
        "Convert latitude/longitude coordinates to map tile coordinates (x, y) for a "
        "given zoom level. Uses the same web mercator projection as MapKit."
    ),
    ToolName.MAP_TILES: (
        "Get map tile URLs from the Macrostrat tiles server. Use lat-lng-to-tile tool "
        "first to get proper x,y coordinates. Defaults to 'carto' scale which "
        "automatically adapts detail level to zoom."
    ),
}


def build_tools() -> tuple[ToolDescriptor, ...]:
    """
    Build descriptors for every tool, in listing order.

    Returns
    -------
    tuple[ToolDescriptor, ...]
        Tool descriptors with JSON schemas derived from the argument models
    """
    return tuple(
        ToolDescriptor(
            name=tool,
            description=TOOL_DESCRIPTIONS[tool],
            input_schema=MappingProxyType(input_schema(tool)),
        )
        for tool in ToolName
    )


@dataclass(frozen=True)
class PromptArgument:
    name: str
    description: str
    required: bool = False
    default: str | None = None


@dataclass(frozen=True)
class PromptDescriptor:
    """A prompt template and the coroutine that renders it."""

    name: str
    description: str
    arguments: tuple[PromptArgument, ...]
    render: Callable[..., Awaitable[str]] = field(compare=False, repr=False)


@dataclass(frozen=True)
class TileInfo:
    """Static licensing and description text attached to map tile results."""

    layers: tuple[str, ...] = ("units", "lines")
    license: str = "CC BY 4.0 International"
    attribution: str = "Macrostrat and original data providers"

    def describe(self, scale: str) -> dict[str, Any]:
        if scale == "carto":
            description = (
                "Adaptive geological map that selects appropriate detail level based on zoom"
            )
        else:
            description = f'Maps from the "{scale}" scale (may have limited geographic coverage)'
        return {
            "layers": list(self.layers),
            "description": description,
            "license": self.license,
            "attribution": self.attribution,
        }


@dataclass(frozen=True)
class GatewayConfig:
    """
    Immutable gateway configuration, built once at startup.

    Parameters
    ----------
    tools : tuple[ToolDescriptor, ...]
        Tool menu
    prompts : tuple[PromptDescriptor, ...]
        Prompt templates
    resources : tuple[ResourceDescriptor, ...]
        Readable schema documents
    roots : tuple[Root, ...]
        Declared upstream endpoints
    roles : Mapping[str, str]
        Logical endpoint role to root URI
    timescale_id : int
        Macrostrat timescale used by the timescale tool (11 is the international
        ages timescale)
    http_timeout : float
        Seconds before an upstream request is abandoned
    user_agent : str
        User-Agent sent upstream and to the geocoder
    tile_info : TileInfo
        Static text attached to map tile results
    """

    tools: tuple[ToolDescriptor, ...]
    prompts: tuple[PromptDescriptor, ...]
    resources: tuple[ResourceDescriptor, ...]
    roots: tuple[Root, ...] = ROOTS
    roles: MappingProxyType = field(default_factory=lambda: MappingProxyType(ROOT_ROLES))
    name: str = "macrostrat"
    version: str = "1.0.0"
    timescale_id: int = 11
    http_timeout: float = 30.0
    user_agent: str = "macrostrat-mcp"
    tile_info: TileInfo = field(default_factory=TileInfo)

    def __post_init__(self) -> None:
        for role, uri in self.roles.items():
            matches = [root for root in self.roots if root.kind == "api" and root.uri == uri]
            if len(matches) != 1:
                raise ValueError(
                    f"Root role '{role}' must match exactly one api root, found {len(matches)}"
                )
        _check_unique("tool", [t.name for t in self.tools])
        _check_unique("prompt", [p.name for p in self.prompts])
        _check_unique("resource", [r.uri for r in self.resources])

    def resolve_root(self, role: str) -> str:
        """
        URI of the root serving a logical role.

        Parameters
        ----------
        role : str
            One of "base", "units", "map-units", "columns", "defs", "tiles"

        Returns
        -------
        str
            Root URI

        Raises
        ------
        NotFoundError
            If the role is not configured
        """
        try:
            return self.roles[role]
        except KeyError:
            raise NotFoundError("root role", role) from None

    def get_tool(self, name: str) -> ToolDescriptor:
        tool = ToolName.parse(name)
        for descriptor in self.tools:
            if descriptor.name is tool:
                return descriptor
        raise NotFoundError("tool", name)

    def get_prompt(self, name: str) -> PromptDescriptor:
        for descriptor in self.prompts:
            if descriptor.name == name:
                return descriptor
        raise NotFoundError("prompt", name)

    def get_resource(self, uri: str) -> ResourceDescriptor:
        for descriptor in self.resources:
            if descriptor.uri == uri:
                return descriptor
        raise NotFoundError("resource", uri)


def _check_unique(kind: str, keys: list[Any]) -> None:
    seen = set()
    for key in keys:
        if key in seen:
            raise ValueError(f"Duplicate {kind}: {key}")
        seen.add(key)
