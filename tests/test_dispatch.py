"""
Tests for request routing: tools, prompts, resources and roots.
"""

import base64
import json

import httpx
import pytest
from conftest import envelope

from macrostrat_mcp.core.catalog import ROOTS, GatewayConfig, Root
from macrostrat_mcp.core.errors import NotFoundError, ValidationError
from macrostrat_mcp.core.schemas import API_SCHEMAS, SCHEMA_URI_PREFIX

EXPECTED_TOOLS = [
    "find-columns",
    "find-units",
    "find-map-units",
    "defs",
    "defs-autocomplete",
    "mineral-info",
    "timescale",
    "lat-lng-to-tile",
    "map-tiles",
]


@pytest.mark.asyncio
async def test_list_tools(dispatcher) -> None:
    tools = await dispatcher.list_tools()
    assert [tool.name for tool in tools] == EXPECTED_TOOLS
    for tool in tools:
        assert tool.description
        assert tool.inputSchema["type"] == "object"


@pytest.mark.asyncio
async def test_call_tool_wraps_json(dispatcher, upstream) -> None:
    units = [{"unit_id": 1, "unit_name": "Morrison Formation"}]
    upstream.add_json("/api/units", envelope(units))

    content = await dispatcher.call_tool("find-units", {"lat": 40, "lng": -105})

    assert len(content) == 1
    assert content[0].type == "text"
    assert json.loads(content[0].text) == units


@pytest.mark.asyncio
async def test_call_tool_without_network(dispatcher, upstream) -> None:
    content = await dispatcher.call_tool(
        "lat-lng-to-tile", {"lat": 40.015, "lng": -105.27, "zoom": 10}
    )

    assert upstream.requests == []
    result = json.loads(content[0].text)
    assert (result["x"], result["y"], result["z"]) == (212, 387, 10)


@pytest.mark.asyncio
async def test_unknown_tool_makes_no_request(dispatcher, upstream) -> None:
    with pytest.raises(NotFoundError) as excinfo:
        await dispatcher.call_tool("find-fossils", {"lat": 40, "lng": -105})
    assert excinfo.value.kind == "tool"
    assert upstream.requests == []


@pytest.mark.asyncio
async def test_invalid_arguments_make_no_request(dispatcher, upstream) -> None:
    with pytest.raises(ValidationError) as excinfo:
        await dispatcher.call_tool("find-units", {"lat": 95, "lng": -105})
    assert excinfo.value.field == "lat"
    assert upstream.requests == []


@pytest.mark.asyncio
async def test_map_tiles_returns_image_part(dispatcher, upstream, png_bytes) -> None:
    upstream.add("/carto/10/212/387.png", httpx.Response(200, content=png_bytes))

    content = await dispatcher.call_tool(
        "map-tiles", {"z": 10, "x": 212, "y": 387, "fetch_image": True}
    )

    assert [part.type for part in content] == ["text", "image"]
    metadata = json.loads(content[0].text)
    assert metadata["url"] == "https://tiles.macrostrat.org/carto/10/212/387.png"
    assert "error" not in metadata
    assert content[1].mimeType == "image/png"
    assert base64.b64decode(content[1].data) == png_bytes


@pytest.mark.asyncio
async def test_map_tiles_failure_is_text_only(dispatcher, upstream) -> None:
    upstream.add("/carto/10/212/387.png", httpx.Response(503))

    content = await dispatcher.call_tool(
        "map-tiles", {"z": 10, "x": 212, "y": 387, "fetch_image": True}
    )

    assert [part.type for part in content] == ["text"]
    metadata = json.loads(content[0].text)
    assert metadata["error"].startswith("Failed to fetch image: HTTP 503")


@pytest.mark.asyncio
async def test_list_prompts(dispatcher) -> None:
    prompts = await dispatcher.list_prompts()
    assert [prompt.name for prompt in prompts] == ["geologic-history", "bedrock", "geologic-map"]
    geologic_map = prompts[2]
    assert [(arg.name, arg.required) for arg in geologic_map.arguments] == [
        ("location", True),
        ("zoom_level", False),
        ("scale", False),
    ]


@pytest.mark.asyncio
async def test_unknown_prompt(dispatcher) -> None:
    with pytest.raises(NotFoundError) as excinfo:
        await dispatcher.get_prompt("volcano-tour", {"location": "Hawaii"})
    assert excinfo.value.kind == "prompt"


@pytest.mark.asyncio
@pytest.mark.parametrize("arguments", [None, {}, {"location": "   "}])
async def test_prompt_requires_location(dispatcher, arguments) -> None:
    with pytest.raises(ValidationError) as excinfo:
        await dispatcher.get_prompt("geologic-history", arguments)
    assert excinfo.value.field == "location"


@pytest.mark.asyncio
async def test_geologic_history_includes_digest(dispatcher, upstream, geocoded) -> None:
    upstream.add_json(
        "/api/units",
        envelope(
            [
                {"unit_name": "Pierre Shale", "b_age": 83.6, "t_age": 70.6, "lith": "shale"},
                {"unit_name": "Fox Hills Sandstone", "b_age": 70.6, "t_age": 66},
            ]
        ),
    )

    result = await dispatcher.get_prompt("geologic-history", {"location": "Boulder, CO"})

    assert geocoded == ["Boulder, CO"]
    assert upstream.urls == [
        "https://macrostrat.org/api/units?lat=40.015&lng=-105.27&response=long"
    ]
    assert len(result.messages) == 1
    message = result.messages[0]
    assert message.role == "user"
    text = message.content.text
    assert text.startswith("Generate a comprehensive geologic history for the location: Boulder")
    assert "Macrostrat reports 2 units at Boulder, CO, spanning 70.6 to 70.6 Ma." in text
    assert "- Pierre Shale: 83.6-70.6 Ma; lithology: shale" in text


@pytest.mark.asyncio
async def test_bedrock_lists_map_sources(dispatcher, upstream) -> None:
    upstream.add_json(
        "/api/geologic_units/map",
        envelope(
            [
                {"name": "Lyons Sandstone", "source_id": 4, "b_age": 290, "t_age": 272},
                {"name": "Fountain Formation", "source_id": 4, "b_age": 310, "t_age": 290},
            ],
            refs={"4": "Boulder County geologic map"},
        ),
    )

    result = await dispatcher.get_prompt("bedrock", {"location": "Flatirons"})

    text = result.messages[0].content.text
    assert "bedrock geology for the location Flatirons" in text
    assert "Macrostrat reports 2 units at Flatirons, spanning 290 to 290 Ma." in text
    assert text.count("- Boulder County geologic map") == 1


@pytest.mark.asyncio
async def test_prompt_survives_upstream_failure(dispatcher, upstream) -> None:
    upstream.add("/api/units", httpx.Response(502))

    result = await dispatcher.get_prompt("geologic-history", {"location": "Boulder"})

    text = result.messages[0].content.text
    assert "Generate a comprehensive geologic history" in text
    assert "Sorry, I could not retrieve Macrostrat data for Boulder" in text


@pytest.mark.asyncio
async def test_prompt_survives_geocoding_failure(config, client, upstream) -> None:
    from macrostrat_mcp.dispatch import Dispatcher

    def geocoder(place: str) -> tuple[float, float]:
        raise ValueError(f"Could not geocode: {place}")

    dispatcher = Dispatcher(config, client, geocoder=geocoder)
    result = await dispatcher.get_prompt("bedrock", {"location": "Atlantis"})

    text = result.messages[0].content.text
    assert "Could not geocode: Atlantis" in text
    assert upstream.requests == []


@pytest.mark.asyncio
async def test_geologic_map_defaults(dispatcher, upstream, geocoded) -> None:
    result = await dispatcher.get_prompt("geologic-map", {"location": "Grand Canyon"})

    text = result.messages[0].content.text
    assert text.startswith("Create a geologic map visualization for Grand Canyon.")
    assert "zoom level 10" in text
    assert 'using "carto" scale' in text
    assert "Step 6:" in text
    assert upstream.requests == []
    assert geocoded == []


@pytest.mark.asyncio
async def test_geologic_map_custom_arguments(dispatcher) -> None:
    result = await dispatcher.get_prompt(
        "geologic-map", {"location": "Moab", "zoom_level": "12", "scale": "large"}
    )
    text = result.messages[0].content.text
    assert "zoom level 12" in text
    assert 'using "large" scale' in text


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("arguments", "field"),
    [
        ({"location": "Moab", "zoom_level": "19"}, "zoom_level"),
        ({"location": "Moab", "zoom_level": "ten"}, "zoom_level"),
        ({"location": "Moab", "scale": "huge"}, "scale"),
    ],
)
async def test_geologic_map_rejects_bad_arguments(dispatcher, arguments, field) -> None:
    with pytest.raises(ValidationError) as excinfo:
        await dispatcher.get_prompt("geologic-map", arguments)
    assert excinfo.value.field == field


@pytest.mark.asyncio
async def test_list_resources(dispatcher) -> None:
    resources = await dispatcher.list_resources()
    uris = [str(resource.uri) for resource in resources]
    assert len(uris) == len(set(uris))
    assert f"{SCHEMA_URI_PREFIX}units" in uris
    for resource in resources:
        assert resource.mimeType == "application/schema+json"


@pytest.mark.asyncio
async def test_read_resource(dispatcher, upstream) -> None:
    contents = await dispatcher.read_resource(f"{SCHEMA_URI_PREFIX}units")

    assert len(contents) == 1
    assert contents[0].mime_type == "application/schema+json"
    assert json.loads(contents[0].content) == json.loads(json.dumps(API_SCHEMAS["units"]))
    assert upstream.requests == []


@pytest.mark.asyncio
async def test_read_unknown_resource(dispatcher) -> None:
    with pytest.raises(NotFoundError) as excinfo:
        await dispatcher.read_resource(f"{SCHEMA_URI_PREFIX}fossils")
    assert excinfo.value.kind == "resource"


@pytest.mark.asyncio
async def test_list_roots(dispatcher) -> None:
    roots = await dispatcher.list_roots()
    assert roots == list(ROOTS)
    assert roots[0].to_dict() == {
        "type": "api",
        "uri": "https://macrostrat.org/api",
        "name": "Macrostrat API",
        "description": "Main Macrostrat API endpoint",
    }


@pytest.mark.fast
def test_role_must_match_a_root(config) -> None:
    with pytest.raises(ValueError, match="units"):
        GatewayConfig(
            tools=config.tools,
            prompts=config.prompts,
            resources=config.resources,
            roots=tuple(root for root in ROOTS if not root.uri.endswith("/units")),
        )


@pytest.mark.fast
def test_duplicate_tools_rejected(config) -> None:
    with pytest.raises(ValueError, match="Duplicate tool"):
        GatewayConfig(
            tools=config.tools + config.tools[:1],
            prompts=config.prompts,
            resources=config.resources,
        )


@pytest.mark.fast
def test_unknown_role(config) -> None:
    with pytest.raises(NotFoundError):
        config.resolve_root("fossils")


@pytest.mark.fast
def test_duplicate_root_uri_is_ambiguous(config) -> None:
    extra = Root(uri="https://macrostrat.org/api", name="Mirror", description="Duplicate")
    with pytest.raises(ValueError, match="base"):
        GatewayConfig(
            tools=config.tools,
            prompts=config.prompts,
            resources=config.resources,
            roots=ROOTS + (extra,),
        )


@pytest.mark.asyncio
async def test_server_registers_every_handler(dispatcher) -> None:
    from mcp import types

    from macrostrat_mcp.server import create_server

    server = create_server(dispatcher)

    for request in (
        types.ListToolsRequest,
        types.CallToolRequest,
        types.ListPromptsRequest,
        types.GetPromptRequest,
        types.ListResourcesRequest,
        types.ReadResourceRequest,
    ):
        assert request in server.request_handlers
    options = server.create_initialization_options()
    assert options.server_name == "macrostrat"
    assert "https://macrostrat.org/api" in options.instructions
