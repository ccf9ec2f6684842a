"""
JSON schemas of Macrostrat API entities, published as MCP resources.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

SCHEMA_URI_PREFIX = "macrostrat://schemas/"
SCHEMA_MIME_TYPE = "application/schema+json"

_NULLABLE_STRING = ["string", "null"]
_NULLABLE_INTEGER = ["integer", "null"]
_NULLABLE_NUMBER = ["number", "null"]


def _field(type_: str | list[str], description: str, **extra: Any) -> dict[str, Any]:
    return {"type": type_, "description": description, **extra}


def _object(**properties: dict[str, Any]) -> dict[str, Any]:
    return {"type": "object", "properties": properties}


# Shared definition-table fields (lithologies, environments, econs, ...)
_DEF_NAME = _field("string", "name of the entity")
_DEF_GROUP = _field(_NULLABLE_STRING, "definition group, less inclusive than type")
_DEF_TYPE = _field(_NULLABLE_STRING, "definition type, less inclusive than class")
_DEF_CLASS = _field(_NULLABLE_STRING, "definition class, more inclusive than type")
_DEF_COLOR = _field(
    _NULLABLE_STRING, "recommended coloring for units based on dominant lithology"
)

_LITH = _field(_NULLABLE_STRING, "specific lithology, see /defs/lithologies")
_ENVIRON = _field(_NULLABLE_STRING, "specific environment, see /defs/environments")
_ECON = _field(_NULLABLE_STRING, "name of economic use, see defs/econs")
_B_AGE = _field(
    "number", "continuous time age model estimated for initiation, in Myr before present"
)
_T_AGE = _field(
    "number", "continuous time age model estimated for truncation, in Myr before present"
)
_COL_AREA = _field("number", "area in square kilometers of the Macrostrat column")
_PROJECT_ID = _field(
    "integer", "unique identifier for project, corresponds to general geographic region"
)
_PBDB_COLLECTIONS = _field("integer", "count of PBDB collections in units/column")

API_SCHEMAS: dict[str, dict[str, Any]] = {
    "api_response": {
        "type": "object",
        "properties": {
            "success": {
                "type": "object",
                "properties": {
                    "v": _field("integer", "API version number"),
                    "license": _field("string", "Data license (typically CC-BY 4.0)"),
                    "data": _field(
                        "array",
                        "Array of data objects - structure depends on endpoint",
                        items={"type": "object"},
                    ),
                    "refs": _field(
                        "object",
                        "References keyed by source_id (map units only)",
                        additionalProperties={"type": "string"},
                    ),
                },
                "required": ["data"],
            }
        },
        "required": ["success"],
    },
    "units": _object(
        unit_id=_field("integer", "unique identifier for unit"),
        section_id=_field("integer", "unique identifier for section (package)"),
        col_id=_field("integer", "unique identifier for column"),
        project_id=_PROJECT_ID,
        col_area=_COL_AREA,
        unit_name=_field(_NULLABLE_STRING, "the name of the unit"),
        strat_name_id=_field(
            _NULLABLE_INTEGER,
            "unique identifier for known stratigraphic name(s) (see /defs/strat_names)",
        ),
        Mbr=_field(_NULLABLE_STRING, "lithostratigraphic member"),
        Fm=_field(_NULLABLE_STRING, "lithostratigraphic formation"),
        Gp=_field(_NULLABLE_STRING, "lithostratigraphic group"),
        SGp=_field(_NULLABLE_STRING, "lithostratigraphic supergroup"),
        t_age=_T_AGE,
        b_age=_B_AGE,
        max_thick=_field("number", "maximum unit thickness in meters"),
        min_thick=_field(
            "number",
            "minimum unit thickness in meters "
            "(NB: some zero values may be equivalent in meaning to NULL)",
        ),
        outcrop=_field(
            "string",
            "describes where unit is exposed or not, values are "
            "'outcrop', 'subsurface', or 'both'",
            enum=["outcrop", "subsurface", "both"],
        ),
        pbdb_collections=_PBDB_COLLECTIONS,
        pbdb_occurrences=_field("integer", "count of PBDB occurrences in units/column"),
        lith=_LITH,
        environ=_ENVIRON,
        econ=_ECON,
        measure=_field(
            ["array", "null"],
            "summary of types of measurements available",
            items={"type": "string"},
        ),
        notes=_field(_NULLABLE_STRING, "notes relevant to containing element"),
        color=_field(
            "string", "recommended coloring for units based on dominant lithology"
        ),
        text_color=_field("string", "recommended coloring for text based on color"),
        t_int_id=_field(
            "integer",
            "the ID of the chronostratigraphic interval containing the top boundary "
            "of the unit",
        ),
        t_int_name=_field(
            "string",
            "the name of the chronostratigraphic interval containing the top boundary "
            "of the unit",
        ),
        t_int_age=_field(
            "number",
            "the top age of the chronostratigraphic interval containing the top "
            "boundary of the unit",
        ),
        t_prop=_field(
            "number",
            "position of continuous time age model top boundary, proportional to "
            "reference time interval (t_interval)",
        ),
        units_above=_field(
            "array",
            "the unit_ids of the units contacting the top of the unit",
            items={"type": "integer"},
        ),
        b_int_id=_field(
            "integer",
            "the ID of the chronostratigraphic interval containing the bottom "
            "boundary of the unit",
        ),
        b_int_name=_field(
            "string",
            "the name of the chronostratigraphic interval containing the bottom "
            "boundary of the unit",
        ),
        b_int_age=_field(
            "number",
            "the bottom age of the chronostratigraphic interval containing the "
            "bottom boundary of the unit",
        ),
        b_prop=_field(
            "number",
            "position of continuous time age model bottom boundary, proportional to "
            "reference time interval (b_interval)",
        ),
        units_below=_field(
            "array",
            "the unit_ids of the units contacting the bottom of the unit",
            items={"type": "integer"},
        ),
        clat=_field(
            "number",
            "present day latitude of the centroid of the column to which the unit "
            "belongs",
        ),
        clng=_field(
            "number",
            "present day longitude of the centroid of the column to which the unit "
            "belongs",
        ),
        t_plat=_field(
            "number", "same as clat, but rotated to the t_age. Top age paleo latitude."
        ),
        t_plng=_field(
            "number", "same as clng, but rotated to the t_age. Top age paleo longitude."
        ),
        b_plat=_field(
            "number",
            "same as clat, but rotated to the b_age. Bottom age paleo latitude.",
        ),
        b_plng=_field(
            "number",
            "same as clng, but rotated to the b_age. Bottom age paleo longitude.",
        ),
        t_pos=_field(
            "number",
            "The position of unit top in ordering of units in section, optionally in "
            "units of m for some columns (e.g., eODP project)",
        ),
        b_pos=_field(
            "number",
            "The position of unit bottom in ordering of units in section, optionally "
            "in units of m for some columns (e.g., eODP project)",
        ),
    ),
    "map_units": _object(
        map_id=_field("integer", "unique identifier for the map polygon"),
        source_id=_field(
            "integer", "identifier of the map source, key into the response refs"
        ),
        name=_field(_NULLABLE_STRING, "name of the map unit"),
        strat_name=_field(_NULLABLE_STRING, "stratigraphic name(s) given by the map"),
        lith=_field(_NULLABLE_STRING, "lithology as described by the map source"),
        descrip=_field(_NULLABLE_STRING, "description of the map unit"),
        comments=_field(_NULLABLE_STRING, "comments from the map source"),
        t_int_name=_field(_NULLABLE_STRING, "name of the top chronostratigraphic interval"),
        b_int_name=_field(
            _NULLABLE_STRING, "name of the bottom chronostratigraphic interval"
        ),
        best_int_name=_field(
            _NULLABLE_STRING, "name of the interval that best describes the unit age"
        ),
        t_age=_field(_NULLABLE_NUMBER, "top age in Myr before present"),
        b_age=_field(_NULLABLE_NUMBER, "bottom age in Myr before present"),
        color=_field(_NULLABLE_STRING, "recommended display color"),
        macro_units=_field(
            "array",
            "unit_ids of Macrostrat units matched to the map unit",
            items={"type": "integer"},
        ),
        strat_names=_field(
            "array",
            "strat_name_ids matched to the map unit",
            items={"type": "integer"},
        ),
        references=_field(
            _NULLABLE_STRING,
            "citation of the map source, merged from the response refs",
        ),
    ),
    "columns": _object(
        col_id=_field("integer", "unique identifier for column"),
        col_name=_field(_NULLABLE_STRING, "name of column"),
        lat=_field("number", "latitude in WGS84"),
        lng=_field("number", "longitude in WGS84"),
        col_group=_field(
            _NULLABLE_STRING,
            "name of group the column belongs to, generally corresponds to geologic "
            "provinces",
        ),
        col_group_id=_field(
            _NULLABLE_INTEGER, "the ID of the group to which the column belongs"
        ),
        group_col_id=_field(
            _NULLABLE_NUMBER,
            "the original column ID assigned to the column (used in the original "
            "source)",
        ),
        col_area=_COL_AREA,
        project_id=_PROJECT_ID,
        max_thick=_field("number", "maximum unit thickness in meters"),
        max_min_thick=_field("integer", "the maximum possible minimum thickness in meters"),
        min_min_thick=_field("integer", "the minimum possible minimum thickness in meters"),
        b_age=_B_AGE,
        t_age=_T_AGE,
        pbdb_collections=_PBDB_COLLECTIONS,
        lith=_LITH,
        environ=_ENVIRON,
        econ=_ECON,
        t_units=_field("integer", "total units"),
        t_sections=_field("integer", "total sections"),
    ),
    "minerals": _object(
        mineral_id=_field("integer", "unique identifier for mineral"),
        mineral=_field("string", "name of mineral"),
        mineral_type=_field("string", "name of mineral group"),
        hardness_min=_field(_NULLABLE_NUMBER, "minimum value for Moh's hardness scale"),
        hardness_max=_field(_NULLABLE_NUMBER, "maximum value for Moh's hardness scale"),
        mineral_color=_field(_NULLABLE_STRING, "color description of mineral"),
        lustre=_field(_NULLABLE_STRING, "description of mineral lustre"),
        crystal_form=_field(_NULLABLE_STRING, "crystal form of mineral"),
        formula=_field("string", "chemical formula of mineral"),
        formula_tags=_field(
            "string", "chemical formula of mineral with sub/superscript tags"
        ),
        url=_field(
            "string",
            "URL where additional information, the source or contributing "
            "publication can be found",
        ),
    ),
    "lithologies": _object(
        lith_id=_field("integer", "unique ID of the lithology"),
        name=_field("string", "the name of the entity"),
        group=_DEF_GROUP,
        type=_DEF_TYPE,
        **{"class": _DEF_CLASS},
        color=_DEF_COLOR,
    ),
    "environments": _object(
        environ_id=_field("integer", "unique identifier for the environment"),
        name=_DEF_NAME,
        type=_DEF_TYPE,
        **{"class": _DEF_CLASS},
        color=_DEF_COLOR,
    ),
    "timescales": _object(
        timescale_id=_field("integer", "unique identifier"),
        timescale=_field("string", "timescale name"),
        max_age=_field("string", "maximum age using International time scale"),
        min_age=_field("string", "minimum age using International time scale"),
        n_intervals=_field("integer", "count of intervals in timescale"),
        ref_id=_field("integer", "unique reference identifier"),
    ),
    "intervals": _object(
        int_id=_field("integer", "unique interval identifier"),
        name=_field("string", "name of the interval"),
        abbrev=_field("string", "standard abbreviation for interval name"),
        t_age=_field("number", "truncation age in millions of years before present"),
        b_age=_field("number", "initiation age in millions of years before present"),
        int_type=_field("string", "temporal rank of the interval"),
        color=_field("string", "recommended color based on dominant lithology"),
    ),
    "econs": _object(
        econ_id=_field("integer", "unique econ identifier"),
        name=_DEF_NAME,
        type=_DEF_TYPE,
        **{"class": _DEF_CLASS},
        color=_DEF_COLOR,
    ),
    "strat_names": _object(
        strat_name=_field(_NULLABLE_STRING, "informal unit name"),
        rank=_field(_NULLABLE_STRING, "stratigraphic rank of the unit"),
        strat_name_id=_field("integer", "unique identifier"),
        concept_id=_field(
            _NULLABLE_INTEGER, "unique identifier for stratigraphic name concept"
        ),
        bed=_field(_NULLABLE_STRING, "bed name"),
        bed_id=_field(_NULLABLE_INTEGER, "bed identifier"),
        mbr=_field(_NULLABLE_STRING, "member name"),
        mbr_id=_field(_NULLABLE_INTEGER, "member identifier"),
        fm=_field(_NULLABLE_STRING, "formation name"),
        fm_id=_field(_NULLABLE_INTEGER, "formation identifier"),
        gp=_field(_NULLABLE_STRING, "group name"),
        gp_id=_field(_NULLABLE_INTEGER, "group identifier"),
        sgp=_field(_NULLABLE_STRING, "supergroup name"),
        sgp_id=_field(_NULLABLE_INTEGER, "supergroup identifier"),
        b_age=_field(_NULLABLE_NUMBER, "estimated initiation time (Myr before present)"),
        t_age=_field(_NULLABLE_NUMBER, "estimated truncation time (Myr before present)"),
        ref_id=_field(_NULLABLE_INTEGER, "unique reference identifier"),
    ),
    "structures": _object(
        structure_id=_field("integer", "unique structure ID"),
        name=_DEF_NAME,
        group=_DEF_GROUP,
        type=_DEF_TYPE,
        **{"class": _DEF_CLASS},
    ),
    "measurements": _object(
        measure_id=_field("integer", "unique ID of the measurement"),
        name=_DEF_NAME,
        type=_DEF_TYPE,
        **{"class": _DEF_CLASS},
        t_units=_field("integer", "total units"),
    ),
}


@dataclass(frozen=True)
class ResourceDescriptor:
    """A readable JSON-schema resource."""

    uri: str
    name: str
    description: str
    schema: MappingProxyType
    mime_type: str = SCHEMA_MIME_TYPE


# (schema key, display name, description)
_RESOURCE_INFO: list[tuple[str, str, str]] = [
    (
        "api_response",
        "API Response Wrapper Schema",
        "JSON schema for the standard Macrostrat API response wrapper containing "
        "success metadata and data array",
    ),
    ("units", "Units Response Schema", "JSON schema for the response from the units endpoint"),
    (
        "map_units",
        "Map Units Response Schema",
        "JSON schema for the response from the geologic_units/map endpoint, "
        "with merged references",
    ),
    (
        "columns",
        "Columns Response Schema",
        "JSON schema for the response from the columns endpoint",
    ),
    (
        "minerals",
        "Minerals Response Schema",
        "JSON schema for the response from the defs/minerals endpoint",
    ),
    (
        "lithologies",
        "Lithologies Response Schema",
        "JSON schema for the response from the defs/lithologies endpoint",
    ),
    (
        "environments",
        "Environments Response Schema",
        "JSON schema for the response from the defs/environments endpoint",
    ),
    (
        "timescales",
        "Timescales Response Schema",
        "JSON schema for the response from the defs/timescales endpoint",
    ),
    (
        "intervals",
        "Intervals Response Schema",
        "JSON schema for the response from the defs/intervals endpoint",
    ),
    (
        "econs",
        "Economic Uses Response Schema",
        "JSON schema for the response from the defs/econs endpoint",
    ),
    (
        "strat_names",
        "Stratigraphic Names Response Schema",
        "JSON schema for the response from the defs/strat_names endpoint",
    ),
    (
        "structures",
        "Structures Response Schema",
        "JSON schema for the response from the defs/structures endpoint",
    ),
    (
        "measurements",
        "Measurements Response Schema",
        "JSON schema for the response from the defs/measurements endpoint",
    ),
]


def build_resources() -> tuple[ResourceDescriptor, ...]:
    """
    Build the resource descriptors for every published schema.

    Returns
    -------
    tuple[ResourceDescriptor, ...]
        One descriptor per schema, in listing order
    """
    return tuple(
        ResourceDescriptor(
            uri=f"{SCHEMA_URI_PREFIX}{key}",
            name=name,
            description=description,
            schema=MappingProxyType(API_SCHEMAS[key]),
        )
        for key, name, description in _RESOURCE_INFO
    )
