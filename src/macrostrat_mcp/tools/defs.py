"""
Dictionary lookups: definitions, autocomplete, minerals, and time intervals.

These tools return the upstream body verbatim.
"""

from typing import Any
from urllib.parse import parse_qsl

from ..core.client import MacrostratClient, format_query_value
from ..core.validation import DefsArgs, DefsAutocompleteArgs, MineralInfoArgs, TimescaleArgs


async def defs(client: MacrostratClient, args: DefsArgs) -> Any:
    """Query ``/defs/{endpoint}`` with a caller-supplied query string."""
    params = parse_qsl(args.parameters.lstrip("?"), keep_blank_values=True)
    return await client.get_json(client.endpoint("base", f"/defs/{args.endpoint}"), params)


async def defs_autocomplete(client: MacrostratClient, args: DefsAutocompleteArgs) -> Any:
    return await client.get_json(
        client.endpoint("base", "/defs/autocomplete"), {"query": args.query}
    )


async def mineral_info(client: MacrostratClient, args: MineralInfoArgs) -> Any:
    params = {
        key: value
        for key, value in (
            ("mineral", args.mineral),
            ("mineral_type", args.mineral_type),
            ("element", args.element),
        )
        if value
    }
    return await client.get_json(client.endpoint("base", "/defs/minerals"), params)


async def timescale(client: MacrostratClient, args: TimescaleArgs) -> Any:
    """
    Intervals of the configured timescale containing ``args.age``.

    Parameters
    ----------
    client : MacrostratClient
        Upstream client
    args : TimescaleArgs
        Validated arguments

    Returns
    -------
    Any
        Body of ``/v2/defs/intervals``
    """
    params = {
        "timescale_id": str(client.config.timescale_id),
        "age": format_query_value(args.age),
    }
    return await client.get_json(client.endpoint("base", "/v2/defs/intervals"), params)
