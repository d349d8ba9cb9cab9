"""
Completion check: has a route crossed every named waterway of an area?

Comparison is by count: an area is complete when all of its merged
waterways intersect the route. Two different sets of the same size are
indistinguishable here.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterable, List, Union
from loguru import logger

from ..models import FeatureCollection, PipelineResult, Route
from .intersection import intersecting_features


AreaId = Union[int, str]
AreaWaterwaysFetcher = Callable[[AreaId], PipelineResult]


def is_area_complete(area_waterways: FeatureCollection, route: Route) -> bool:
    """True when every waterway of the area intersects the route"""
    if not area_waterways.features:
        return False
    crossed = intersecting_features(area_waterways, route)
    return len(crossed) == len(area_waterways)


def completed_area_ids(
    intersecting: FeatureCollection,
    area_ids: Iterable[AreaId],
    route: Route,
    fetch_area_waterways: AreaWaterwaysFetcher,
    max_workers: int = 4,
) -> List[AreaId]:
    """
    Area ids whose named waterways are all crossed by the route

    Area waterways are fetched concurrently; an area whose fetch fails or
    returns no data is never complete. Result order follows area_ids.
    """
    area_ids = list(area_ids)
    if not area_ids:
        return []
    if not intersecting.features:
        logger.info("Route crosses no waterways, no area can be complete")
        return []

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        results = list(executor.map(fetch_area_waterways, area_ids))

    completed = []
    for area_id, result in zip(area_ids, results):
        if not result.ok:
            logger.warning(f"No waterways for area {area_id} ({result.status.value}): {result.error}")
            continue
        if is_area_complete(result.features, route):
            completed.append(area_id)

    logger.info(f"Completed areas: {completed}")
    return completed
