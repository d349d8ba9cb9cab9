"""
Overpass QL query builders

Pure string builders, one per query shape. Bounding boxes come in as
(min_lon, min_lat, max_lon, max_lat) and go out in Overpass order
(south, west, north, east).
"""

from typing import Iterable, Optional
from loguru import logger

from ...config import get_config
from ...models import BBox
from ...analysis.geometry_utils import GeometryUtils


def _overpass_bbox(bbox: BBox) -> str:
    return f"{bbox[1]},{bbox[0]},{bbox[3]},{bbox[2]}"


def area_id(relation_id: int, offset: Optional[int] = None) -> int:
    """OSM area id of a relation"""
    if offset is None:
        offset = get_config().query.osm_area_offset
    return int(relation_id) + offset


def waterways_in_bbox_query(bbox: BBox, size_limit_m2: Optional[float] = None) -> str:
    """
    Waterway ways and relations inside a bbox

    Bboxes larger than the size limit only fetch relations (major
    waterways) to keep the result small.
    """
    if size_limit_m2 is None:
        size_limit_m2 = get_config().query.bbox_size_limit_m2
    b = _overpass_bbox(bbox)
    bbox_area = GeometryUtils.bbox_area_m2(bbox)
    if bbox_area > size_limit_m2:
        logger.info(
            f"The bbox is too big ({bbox_area:.0f} m**2 > {size_limit_m2:.0f}), "
            "fetching only waterway relations and ignoring smaller streams"
        )
        return f'[out:json];rel["waterway"]({b});out geom;'
    return f'[out:json];(rel["waterway"]({b});way["waterway"]({b});)->._;out geom;'


def waterways_in_area_query(relation_id: int, offset: Optional[int] = None) -> str:
    """Waterway ways and relations inside an administrative relation"""
    a = area_id(relation_id, offset)
    return f'[out:json];(rel(area:{a})["waterway"];way(area:{a})["waterway"];)->._;out geom;'


def waterway_relations_in_area_query(relation_id: int, offset: Optional[int] = None) -> str:
    """Only waterway relations inside an administrative relation"""
    return f'[out:json];rel(area:{area_id(relation_id, offset)})["waterway"];out geom;'


def pois_in_relation_query(relation_id: int, tag_filter: str, offset: Optional[int] = None) -> str:
    """Nodes matching a tag filter, e.g. amenity~"^(pub|bar)$", inside a relation"""
    return f"[out:json];node(area:{area_id(relation_id, offset)})[{tag_filter}];out geom;"


def pois_in_circle_query(lat: float, lon: float, radius_m: float, tag_filter: str) -> str:
    """Nodes matching a tag filter within radius_m of a center point"""
    return f"[out:json];node(around:{radius_m:g},{lat},{lon})[{tag_filter}];out geom;"


def node_query(node_id: int) -> str:
    return f"[out:json];node({int(node_id)});out geom;"


def places_in_bbox_query(bbox: BBox, place_types: Optional[Iterable[str]] = None) -> str:
    """Place relations (city/town/village) in a bbox, tags only"""
    if place_types is None:
        place_types = get_config().query.place_types
    b = _overpass_bbox(bbox)
    clauses = "".join(f'relation[place="{place}"]({b});' for place in place_types)
    return f"[out:json];({clauses});out tags;"
