"""
Geometry utilities wrapping shapely (planar predicates, slicing) and
pyproj (geodesic length and area on WGS84)

Coordinates are always [lon, lat]. Lengths are kilometres and areas
square metres, so every caller works in the same units.
"""

from typing import List, Dict, Any, Union, Iterable
from loguru import logger
from pyproj import Geod
from shapely.errors import ShapelyError
from shapely.geometry import shape, box, Point, LineString, Polygon
from shapely.geometry.base import BaseGeometry
from shapely.ops import substring

from ..errors import MalformedGeometryError
from ..models import BBox, Feature, FeatureCollection


_GEOD = Geod(ellps="WGS84")

# turf-style combine families: each family collapses into one Multi* geometry
_FAMILIES = {
    "Point": "MultiPoint",
    "MultiPoint": "MultiPoint",
    "LineString": "MultiLineString",
    "MultiLineString": "MultiLineString",
    "Polygon": "MultiPolygon",
    "MultiPolygon": "MultiPolygon",
}


class GeometryUtils:
    """Geometry primitives used by every analysis stage"""

    @staticmethod
    def to_shape(geometry: Union[Feature, Dict[str, Any], None]) -> BaseGeometry:
        """Build a shapely geometry, raising MalformedGeometryError when impossible"""
        if isinstance(geometry, Feature):
            geometry = geometry.geometry
        if not geometry:
            raise MalformedGeometryError("Feature has no geometry")
        try:
            geom = shape(geometry)
        except (KeyError, TypeError, ValueError, AttributeError, IndexError, ShapelyError) as e:
            raise MalformedGeometryError(f"Cannot build {geometry.get('type')} geometry: {e}") from e
        if geom.is_empty:
            raise MalformedGeometryError(f"Empty {geometry.get('type')} geometry")
        return geom

    @staticmethod
    def bbox(obj: Union[Feature, FeatureCollection, Dict[str, Any]]) -> BBox:
        """Bounding box (min_lon, min_lat, max_lon, max_lat) of a feature or collection"""
        if isinstance(obj, FeatureCollection):
            bounds = []
            for feature in obj.features:
                try:
                    bounds.append(GeometryUtils.to_shape(feature).bounds)
                except MalformedGeometryError as e:
                    logger.warning(f"Skipping feature {feature.id} in bbox: {e}")
            if not bounds:
                raise MalformedGeometryError("Cannot compute bbox of an empty collection")
            return (
                min(b[0] for b in bounds),
                min(b[1] for b in bounds),
                max(b[2] for b in bounds),
                max(b[3] for b in bounds),
            )
        return tuple(GeometryUtils.to_shape(obj).bounds)

    @staticmethod
    def bbox_polygon(bbox: BBox) -> Polygon:
        return box(*bbox)

    @staticmethod
    def area_m2(geom: BaseGeometry) -> float:
        """Geodesic area in square metres"""
        area, _ = _GEOD.geometry_area_perimeter(geom)
        return abs(area)

    @staticmethod
    def bbox_area_m2(bbox: BBox) -> float:
        return GeometryUtils.area_m2(GeometryUtils.bbox_polygon(bbox))

    @staticmethod
    def length_km(geom: BaseGeometry) -> float:
        """Geodesic length in kilometres"""
        if isinstance(geom, Point):
            return 0.0
        return _GEOD.geometry_length(geom) / 1000.0

    @staticmethod
    def nearest_point_on_line(line: LineString, point: Point) -> Point:
        return line.interpolate(line.project(point))

    @staticmethod
    def line_slice(start: Point, stop: Point, line: LineString) -> BaseGeometry:
        """
        Part of the line between the points on it nearest to start and stop

        Returns a Point when both project onto the same location.
        """
        d1 = line.project(start)
        d2 = line.project(stop)
        return substring(line, min(d1, d2), max(d1, d2))

    @staticmethod
    def distance_along_km(line: LineString, point: Point) -> float:
        """Arc length from the first coordinate of line to the point"""
        sliced = GeometryUtils.line_slice(Point(line.coords[0]), point, line)
        return GeometryUtils.length_km(sliced)

    @staticmethod
    def intersects(a: BaseGeometry, b: BaseGeometry) -> bool:
        try:
            return a.intersects(b)
        except ShapelyError as e:
            raise MalformedGeometryError(f"Intersection test failed: {e}") from e

    @staticmethod
    def intersection_points(a: BaseGeometry, b: BaseGeometry) -> List[Point]:
        """
        Points where two geometries meet

        Proper crossings yield their crossing point; overlapping stretches
        yield both ends of the shared segment.
        """
        try:
            shared = a.intersection(b)
        except ShapelyError as e:
            raise MalformedGeometryError(f"Intersection failed: {e}") from e

        points: List[Point] = []
        seen = set()

        def collect(geom: BaseGeometry):
            if geom.is_empty:
                return
            if isinstance(geom, Point):
                candidates = [geom]
            elif isinstance(geom, LineString):
                candidates = [Point(geom.coords[0]), Point(geom.coords[-1])]
            elif isinstance(geom, Polygon):
                candidates = [Point(c) for c in geom.exterior.coords]
            else:
                for part in geom.geoms:
                    collect(part)
                return
            for p in candidates:
                key = (round(p.x, 12), round(p.y, 12))
                if key not in seen:
                    seen.add(key)
                    points.append(p)

        collect(shared)
        return points

    @staticmethod
    def combine(geometries: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """
        Combine geometries into one Multi* geometry per family

        Lines and multilines become a single MultiLineString; mixing
        families (e.g. a riverbank polygon with a river line) yields one
        geometry per family in order of first appearance.
        """
        combined: Dict[str, List[Any]] = {}
        for geometry in geometries:
            geom_type = geometry.get("type") if geometry else None
            family = _FAMILIES.get(geom_type)
            if family is None:
                logger.warning(f"Cannot combine geometry of type {geom_type}")
                continue
            parts = combined.setdefault(family, [])
            if geom_type.startswith("Multi"):
                parts.extend(geometry["coordinates"])
            else:
                parts.append(geometry["coordinates"])
        return [{"type": family, "coordinates": parts} for family, parts in combined.items()]
