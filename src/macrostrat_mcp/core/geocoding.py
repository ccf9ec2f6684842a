"""
Geocoding utilities for turning prompt locations into coordinates.
"""

import re

from geopy.extra.rate_limiter import RateLimiter
from geopy.geocoders import Nominatim

_COORDINATE_PAIR = re.compile(
    r"^\s*\(?\s*(-?\d+(?:\.\d+)?)\s*[,\s]\s*(-?\d+(?:\.\d+)?)\s*\)?\s*$"
)


def parse_coordinates(text: str) -> tuple[float, float] | None:
    """
    Read a "lat, lng" pair typed directly into a location argument.

    Examples:
        "40.0, -105.0" → (40.0, -105.0)
        "(36.1 -112.1)" → (36.1, -112.1)
        "Boulder, CO" → None

    Args:
        text: Location string

    Returns:
        (lat, lng) if the text is a valid coordinate pair, otherwise None
    """
    match = _COORDINATE_PAIR.match(text)
    if not match:
        return None
    lat, lng = float(match.group(1)), float(match.group(2))
    if not (-90 <= lat <= 90 and -180 <= lng <= 180):
        return None
    return lat, lng


def place_to_point(place_name: str, user_agent: str = "macrostrat-mcp") -> tuple[float, float]:
    """
    Convert a place name to a (lat, lng) point.

    Examples:
        "Boulder, Colorado" → (40.01, -105.27)

    Args:
        place_name: Human-readable place name, or a "lat, lng" pair
        user_agent: User-Agent sent to Nominatim

    Returns:
        (lat, lng) in decimal degrees

    Raises:
        ValueError: If geocoding fails
    """
    point = parse_coordinates(place_name)
    if point is not None:
        return point

    geolocator = Nominatim(user_agent=user_agent)
    geocode = RateLimiter(geolocator.geocode, min_delay_seconds=1)
    location = geocode(place_name, exactly_one=True)

    if location is not None:
        return float(location.latitude), float(location.longitude)

    raise ValueError(f"Could not geocode: {place_name}")
