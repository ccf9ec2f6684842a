"""
Column and unit queries, including reference merging for map units.
"""

from typing import Any

from ..core.client import MacrostratClient, format_query_value
from ..core.validation import FindColumnsArgs, FindMapUnitsArgs, FindUnitsArgs


def merge_references(units: list[dict[str, Any]], refs: dict[str, Any]) -> list[dict[str, Any]]:
    """
    Attach the citation of each unit's map source to the unit.

    Parameters
    ----------
    units : list[dict]
        Map units, each carrying a ``source_id``
    refs : dict
        Citations keyed by source id, as returned in ``success.refs``

    Returns
    -------
    list[dict]
        New unit dicts, same order, each with a ``references`` key
        (None when the source has no citation)
    """
    merged = []
    for unit in units:
        source_id = unit.get("source_id")
        reference = None
        if source_id is not None:
            # JSON object keys are strings while source_id is an integer
            reference = refs.get(str(source_id), refs.get(source_id))
        merged.append({**unit, "references": reference})
    return merged


async def find_columns(client: MacrostratClient, args: FindColumnsArgs) -> list[dict[str, Any]]:
    """
    Stratigraphic columns at a point.

    Parameters
    ----------
    client : MacrostratClient
        Upstream client
    args : FindColumnsArgs
        Validated arguments

    Returns
    -------
    list[dict]
        ``success.data`` of the columns endpoint
    """
    params = {
        "lat": format_query_value(args.lat),
        "lng": format_query_value(args.lng),
        "adjacents": format_query_value(args.adjacents),
        "response": args.response_type,
    }
    data, _ = await client.get_data(client.endpoint("columns"), params)
    return data


async def find_units(client: MacrostratClient, args: FindUnitsArgs) -> list[dict[str, Any]]:
    """
    Macrostrat units at a point, optionally restricted to units spanning an age.

    Parameters
    ----------
    client : MacrostratClient
        Upstream client
    args : FindUnitsArgs
        Validated arguments

    Returns
    -------
    list[dict]
        ``success.data`` of the units endpoint
    """
    params = {
        "lat": format_query_value(args.lat),
        "lng": format_query_value(args.lng),
        "response": args.response_type,
    }
    if args.age is not None:
        params["age"] = format_query_value(args.age)
    data, _ = await client.get_data(client.endpoint("units"), params)
    return data


async def find_map_units(
    client: MacrostratClient, args: FindMapUnitsArgs
) -> list[dict[str, Any]]:
    """
    Geologic map units at a point, with source citations merged in.

    Parameters
    ----------
    client : MacrostratClient
        Upstream client
    args : FindMapUnitsArgs
        Validated arguments

    Returns
    -------
    list[dict]
        Map units, each with a ``references`` field
    """
    params = {
        "lat": format_query_value(args.lat),
        "lng": format_query_value(args.lng),
        "response": args.response_type,
    }
    data, refs = await client.get_data(client.endpoint("map-units"), params)
    return merge_references(data, refs)
