"""
Natural-language digests of unit lists, used when rendering prompts.
"""

from typing import Any

_NAME_FIELDS = ("unit_name", "name", "strat_name", "Fm", "col_name")
_DESCRIPTION_FIELDS = ("descrip", "notes", "comments")


def _first(entity: dict[str, Any], fields: tuple[str, ...]) -> str | None:
    for key in fields:
        value = entity.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def _lithology(entity: dict[str, Any]) -> str | None:
    lith = entity.get("lith")
    if isinstance(lith, str):
        return lith.strip() or None
    # Long unit responses carry a list of {"name", "prop", ...} objects
    if isinstance(lith, list):
        names = [item.get("name") for item in lith if isinstance(item, dict) and item.get("name")]
        return ", ".join(names) or None
    return None


def _age(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        return float(value)
    return None


def _fmt_age(value: float) -> str:
    return f"{value:g}"


def age_range(entities: list[dict[str, Any]]) -> tuple[float, float] | None:
    """
    Age range covered by a list of units.

    Only entities with both ``b_age`` and ``t_age`` take part.

    Parameters
    ----------
    entities : list[dict]
        Unit records

    Returns
    -------
    tuple[float, float] or None
        ``(min of b_age, max of t_age)``, or None when no entity has both ages
    """
    dated = [
        (b, t)
        for b, t in ((_age(e.get("b_age")), _age(e.get("t_age"))) for e in entities)
        if b is not None and t is not None
    ]
    if not dated:
        return None
    return min(b for b, _ in dated), max(t for _, t in dated)


def describe_unit(entity: dict[str, Any]) -> str:
    """One bullet line for a unit: name, age, lithology, description."""
    name = _first(entity, _NAME_FIELDS) or "Unnamed unit"
    b_age, t_age = _age(entity.get("b_age")), _age(entity.get("t_age"))
    if b_age is not None and t_age is not None:
        age = f"{_fmt_age(b_age)}-{_fmt_age(t_age)} Ma"
    else:
        age = "age unknown"
    interval = _first(entity, ("best_int_name", "b_int_name"))
    if interval:
        age = f"{age} ({interval})"

    parts = [f"- {name}: {age}"]
    lithology = _lithology(entity)
    if lithology:
        parts.append(f"lithology: {lithology}")
    description = _first(entity, _DESCRIPTION_FIELDS)
    if description:
        parts.append(description)
    return "; ".join(parts)


def summarize_units(entities: list[dict[str, Any]], location: str) -> str:
    """
    Build a short digest of the units found at a location.

    Parameters
    ----------
    entities : list[dict]
        Unit or map-unit records from the Macrostrat API
    location : str
        Location label used in the heading

    Returns
    -------
    str
        Multi-line digest
    """
    if not entities:
        return f"No geologic units were found at {location}."

    count = len(entities)
    noun = "unit" if count == 1 else "units"
    heading = f"Macrostrat reports {count} {noun} at {location}"
    span = age_range(entities)
    if span is None:
        heading += "; no unit has both a top and bottom age."
    else:
        heading += f", spanning {_fmt_age(span[0])} to {_fmt_age(span[1])} Ma."

    return "\n".join([heading, *(describe_unit(entity) for entity in entities)])
