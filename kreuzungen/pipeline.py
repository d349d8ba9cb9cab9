"""
Main Pipeline Orchestrator for waterway crossings

Stages, strictly in order for one route:

  1. Route bbox -> waterway query (relations only for huge bboxes)
  2. Overpass fetch -> GeoJSON normalization -> name merge
  3. Intersection with the route
  4. Ordering by distance along the route to the first crossing
  5. Optional: completion check for the cities/towns/villages touched

Usage:
    pipeline = CrossingsPipeline()
    report = pipeline.run(decode_route(open("ride.gpx").read()))
    print(report.message)
"""

import threading
from dataclasses import dataclass, field
from typing import List, Optional, Sequence
from loguru import logger

from .analysis.completion import completed_area_ids
from .analysis.geometry_utils import GeometryUtils
from .analysis.intersection import intersecting_features
from .analysis.messages import create_waterways_message
from .analysis.ordering import IntersectionRecord, order_records
from .collectors.osm.collector import WaterwayCollector
from .config import get_config, PipelineConfig
from .errors import KreuzungenError, UpstreamHttpError
from .models import FeatureCollection, PipelineResult, Route
from .routes import share_url


@dataclass
class CrossingsReport:
    """Everything a presentation layer needs about one processed route"""
    route: Route
    result: PipelineResult                      # ordered intersecting waterways
    records: List[IntersectionRecord] = field(default_factory=list)
    completed_area_ids: List[int] = field(default_factory=list)
    share_url: Optional[str] = None

    @property
    def message(self) -> Optional[str]:
        if not self.result.ok or self.result.is_empty:
            return None
        return create_waterways_message(self.result.features)


class CrossingsPipeline:
    """Route in, ordered crossed waterways out"""

    def __init__(self, config: Optional[PipelineConfig] = None, collector: Optional[WaterwayCollector] = None):
        self.config = config or get_config()
        self.collector = collector or WaterwayCollector(self.config)

    def intersecting_waterways(self, route: Route) -> PipelineResult:
        """Merged named waterways crossed by the route, in no particular order"""
        bbox = GeometryUtils.bbox(route)
        bbox_area = GeometryUtils.bbox_area_m2(bbox)
        if bbox_area > self.config.query.large_route_warning_m2:
            logger.warning(f"The route is a big one ({bbox_area / 1e6:.0f} km²). This may take a while...")

        waterways = self.collector.waterways_in_bbox(bbox)
        if not waterways.ok:
            return waterways

        try:
            crossed = intersecting_features(waterways.features, route)
        except KreuzungenError as e:
            logger.error(f"Error processing route: {e}")
            return PipelineResult.failed(str(e))
        logger.info(f"Route crosses {len(crossed)} of {len(waterways.features)} named waterways in its bbox")
        return PipelineResult.success(crossed)

    def ordered_waterways(self, route: Route) -> PipelineResult:
        result, _ = self._ordered(route)
        return result

    def _ordered(self, route: Route):
        result = self.intersecting_waterways(route)
        if not result.ok:
            return result, []
        records = order_records(result.features, route)
        ordered = FeatureCollection.of(r.feature for r in records)
        return PipelineResult.success(ordered), records

    def city_area_ids(self, route: Route) -> List[int]:
        """Relation ids of the places whose bbox query matches the route bbox"""
        try:
            return self.collector.place_area_ids(GeometryUtils.bbox(route))
        except UpstreamHttpError as e:
            logger.error(f"Failed to fetch places for route: {e}")
            return []

    def completed_area_ids(
        self,
        intersecting: FeatureCollection,
        route: Route,
        area_ids: Optional[Sequence[int]] = None,
    ) -> List[int]:
        """Areas (default: places around the route) whose waterways the route crossed completely"""
        if area_ids is None:
            area_ids = self.city_area_ids(route)
        return completed_area_ids(
            intersecting,
            area_ids,
            route,
            self.collector.waterways_for_area,
            max_workers=self.config.max_workers,
        )

    def run(self, route: Route, check_completion: bool = False) -> CrossingsReport:
        logger.info(f"Processing route '{route.name or 'unnamed'}' with {len(route.coordinates)} points")
        result, records = self._ordered(route)
        report = CrossingsReport(
            route=route,
            result=result,
            records=records,
            share_url=share_url(route, self.config.share_base_url),
        )
        if check_completion and result.ok:
            report.completed_area_ids = self.completed_area_ids(result.features, route)
        return report


class RouteSession:
    """
    Per-user state around the pipeline: current route, selected waterway
    and the latest report

    A new route supersedes any in-flight one; results published with an
    older sequence number are discarded.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._sequence = 0
        self.current_route: Optional[Route] = None
        self.selected_feature_key: Optional[str] = None
        self.report: Optional[CrossingsReport] = None

    def begin(self, route: Route) -> int:
        with self._lock:
            self._sequence += 1
            self.current_route = route
            self.selected_feature_key = None
            self.report = None
            return self._sequence

    def is_current(self, sequence: int) -> bool:
        return sequence == self._sequence

    def publish(self, sequence: int, report: CrossingsReport) -> bool:
        with self._lock:
            if sequence != self._sequence:
                logger.info(f"Discarding stale result #{sequence} (current #{self._sequence})")
                return False
            self.report = report
            return True

    def process(self, pipeline: CrossingsPipeline, route: Route, check_completion: bool = False) -> Optional[CrossingsReport]:
        """Run the pipeline for a route; None when a newer route arrived meanwhile"""
        sequence = self.begin(route)
        report = pipeline.run(route, check_completion=check_completion)
        return report if self.publish(sequence, report) else None
