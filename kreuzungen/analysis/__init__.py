"""
Analysis modules for Kreuzungen

Pure functions over GeoJSON collections: merge, intersect, order, check completion.
"""

from .geometry_utils import GeometryUtils
from .merger import NameMerger, name_key, combine_same_name_features
from .intersection import intersecting_features
from .ordering import IntersectionRecord, order_along_route, order_records
from .completion import completed_area_ids, is_area_complete
from .messages import create_waterways_message, waterway_names

__all__ = [
    "GeometryUtils",
    "NameMerger",
    "name_key",
    "combine_same_name_features",
    "intersecting_features",
    "IntersectionRecord",
    "order_along_route",
    "order_records",
    "completed_area_ids",
    "is_area_complete",
    "create_waterways_message",
    "waterway_names",
]
