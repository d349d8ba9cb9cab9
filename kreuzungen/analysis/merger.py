"""
Name-based merging of waterway fragments

OSM splits a river into many ways; a route crossing it should report the
river once. Features are grouped by feature key (the `name` property) and
each group is combined into one feature.
"""

from typing import Callable, Dict, List, Optional
from loguru import logger

from ..models import Feature, FeatureCollection
from .geometry_utils import GeometryUtils


FeatureKey = Callable[[Feature], Optional[str]]


def name_key(feature: Feature) -> Optional[str]:
    """
    Identity of a waterway for merging, display and completion checks

    Two real waterways sharing a name collapse into one; swap this for an
    OSM relation id based key to get stricter identity.
    """
    return feature.name


class NameMerger:
    """Combines same-key features into single logical features"""

    def __init__(self, key: FeatureKey = name_key):
        self.key = key

    def merge(self, fc: FeatureCollection) -> FeatureCollection:
        """
        Merge features sharing a key

        Features without a key are dropped. Group order follows the first
        appearance of each key. A group of one passes through unchanged.
        """
        groups: Dict[str, List[Feature]] = {}
        unnamed = 0
        for feature in fc.features:
            key = self.key(feature)
            if not key:
                unnamed += 1
                continue
            groups.setdefault(key, []).append(feature)

        if unnamed:
            logger.debug(f"Dropped {unnamed} features without a name before merging")

        merged = [
            group[0] if len(group) == 1 else self._combine_group(key, group)
            for key, group in groups.items()
        ]
        return FeatureCollection.of(merged)

    def _combine_group(self, key: str, group: List[Feature]) -> Feature:
        first = group[0]
        parts = GeometryUtils.combine(f.geometry for f in group)
        if not parts:
            logger.warning(f"No combinable geometry in group '{key}', keeping first member")
            return first
        if len(parts) > 1:
            logger.error(
                f"Merging '{key}' produced {len(parts)} disjoint parts "
                f"({', '.join(p['type'] for p in parts)}); using the first"
            )

        return first.model_copy(update={"geometry": parts[0]}).with_properties(
            name=first.properties.get("name", key),
            merged_ids=[f.id for f in group],
        )


def combine_same_name_features(fc: FeatureCollection) -> FeatureCollection:
    return NameMerger().merge(fc)
