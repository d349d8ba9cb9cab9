"""
Route decoding

Turns GPX documents and encoded polylines into Route features with
[lon, lat] coordinates in travel order, and back into share links.
"""

from typing import List, Optional
from urllib.parse import quote

import gpxpy
import gpxpy.gpx
import polyline
from loguru import logger

from .config import get_config
from .errors import RouteDecodeError
from .models import Route


def decode_polyline(encoded: str, precision: int = 5, **properties) -> Route:
    """Route from a Google encoded polyline; decoded pairs are (lat, lon)"""
    try:
        points = polyline.decode(encoded.strip(), precision)
    except (ValueError, IndexError, TypeError) as e:
        raise RouteDecodeError(f"Invalid encoded polyline: {e}") from e
    if len(points) < 2:
        raise RouteDecodeError(f"Polyline decodes to {len(points)} point(s), need at least two")
    return Route.from_coordinates(([lon, lat] for lat, lon in points), **properties)


def encode_route(route: Route, precision: int = 5) -> str:
    return polyline.encode([(lat, lon) for lon, lat in route.coordinates], precision)


def parse_gpx(contents: str) -> Route:
    """
    Route from a GPX document

    Track points win over route points; all track segments are joined
    in document order. The track (or route) name is kept as `name`.
    """
    try:
        gpx = gpxpy.parse(contents)
    except gpxpy.gpx.GPXException as e:
        raise RouteDecodeError(f"Invalid GPX: {e}") from e

    name: Optional[str] = None
    coords: List[List[float]] = []
    for track in gpx.tracks:
        name = name or track.name
        for segment in track.segments:
            coords.extend([p.longitude, p.latitude] for p in segment.points)
    if not coords:
        for gpx_route in gpx.routes:
            name = name or gpx_route.name
            coords.extend([p.longitude, p.latitude] for p in gpx_route.points)

    if len(coords) < 2:
        raise RouteDecodeError("GPX contains no track or route with at least two points")

    properties = {"name": name or gpx.name} if (name or gpx.name) else {}
    logger.debug(f"Parsed GPX route with {len(coords)} points")
    return Route.from_coordinates(coords, **properties)


def decode_route(text: str) -> Route:
    """Route from either a GPX document or an encoded polyline"""
    stripped = text.lstrip()
    if stripped.startswith("<"):
        return parse_gpx(stripped)
    return decode_polyline(stripped)


def share_url(route: Route, base_url: Optional[str] = None) -> str:
    base_url = base_url or get_config().share_base_url
    return f"{base_url.rstrip('/')}/index.html?route={quote(encode_route(route), safe='')}"
