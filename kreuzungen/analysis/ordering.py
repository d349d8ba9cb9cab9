"""
Order intersecting features by where the route first crosses them
"""

from dataclasses import dataclass
from typing import List, Optional
from loguru import logger
from shapely.geometry import LineString, Point

from ..errors import MalformedGeometryError
from ..models import Feature, FeatureCollection, Route
from .geometry_utils import GeometryUtils


@dataclass
class IntersectionRecord:
    """A feature with its first crossing along the route"""
    feature: Feature
    intersection: Point
    distance_km: float


def first_intersection(feature: Feature, route_line: LineString) -> Optional[IntersectionRecord]:
    """
    Crossing of feature with the smallest arc length from the route start

    Returns None when the feature does not meet the route.
    """
    points = GeometryUtils.intersection_points(GeometryUtils.to_shape(feature), route_line)
    if not points:
        return None
    measured = [(GeometryUtils.distance_along_km(route_line, p), p) for p in points]
    distance, point = min(measured, key=lambda m: m[0])
    return IntersectionRecord(feature=feature, intersection=point, distance_km=distance)


def order_records(fc: FeatureCollection, route: Route) -> List[IntersectionRecord]:
    """IntersectionRecords sorted by distance along the route (stable on ties)"""
    if not fc.features:
        return []

    route_line = GeometryUtils.to_shape(route)
    records = []
    for feature in fc.features:
        try:
            record = first_intersection(feature, route_line)
        except MalformedGeometryError as e:
            logger.warning(f"Dropping feature {feature.id} ({feature.name}) from ordering: {e}")
            continue
        if record is None:
            logger.warning(f"Feature {feature.id} ({feature.name}) does not cross the route, dropping it")
            continue
        records.append(record)

    records.sort(key=lambda r: r.distance_km)
    return records


def order_along_route(fc: FeatureCollection, route: Route) -> FeatureCollection:
    """Re-order intersecting features ascending by distance to their first crossing"""
    return FeatureCollection.of(r.feature for r in order_records(fc, route))
