"""
Route intersection: which candidate features touch or cross the route
"""

from loguru import logger

from ..errors import MalformedGeometryError
from ..models import FeatureCollection, Route
from .geometry_utils import GeometryUtils


def intersecting_features(fc: FeatureCollection, route: Route) -> FeatureCollection:
    """
    Filter fc down to the features intersecting the route

    Input order is preserved. Features whose geometry cannot be tested are
    treated as non-intersecting.
    """
    if not fc.features:
        return FeatureCollection()

    route_line = GeometryUtils.to_shape(route)
    hits = []
    for feature in fc.features:
        try:
            if GeometryUtils.intersects(GeometryUtils.to_shape(feature), route_line):
                hits.append(feature)
        except MalformedGeometryError as e:
            logger.warning(f"Excluding feature {feature.id} ({feature.name}) from intersection: {e}")

    logger.debug(f"{len(hits)} of {len(fc)} features intersect the route")
    return FeatureCollection.of(hits)
