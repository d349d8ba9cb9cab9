"""
Main OSM Collector

Orchestrates query building, fetching (with optional disk cache),
normalization and name merging for each query scope.
"""

from typing import Dict, Any, List, Optional, Union
from loguru import logger

from .api_client import OverpassAPIClient
from .cache import OSMCache
from .geocoder import AreaGeocoder
from .parser import OSMResponseParser
from . import queries
from ...analysis.merger import NameMerger
from ...config import get_config, PipelineConfig
from ...errors import AreaNotFoundError, UpstreamHttpError
from ...models import BBox, FeatureCollection, PipelineResult


class WaterwayCollector:
    """
    Collect waterways, places and POIs from OpenStreetMap via Overpass API

    Every waterway entry point returns a PipelineResult so "request failed",
    "no data" and "empty but valid" stay distinguishable.
    """

    def __init__(
        self,
        config: Optional[PipelineConfig] = None,
        api_client: Optional[OverpassAPIClient] = None,
        geocoder: Optional[AreaGeocoder] = None,
        merger: Optional[NameMerger] = None,
    ):
        self.config = config or get_config()
        self.api_client = api_client or OverpassAPIClient(self.config.api)
        self.geocoder = geocoder or AreaGeocoder(self.config.api)
        self.cache = OSMCache(self.config.cache_dir)
        self.parser = OSMResponseParser()
        self.merger = merger or NameMerger()

    def fetch(self, query: str) -> Optional[Dict[str, Any]]:
        """
        Raw Overpass response for a query, served from cache when possible

        Raises:
            UpstreamHttpError: the Overpass request failed
        """
        cached = self.cache.get(query)
        if cached:
            return cached

        logger.debug(f"Overpass query: {query}")
        data = self.api_client.query(query)
        if self.parser.load(data) is not None:
            self.cache.put(query, data)
        return data

    def fetch_features(self, query: str, merge: bool = True) -> PipelineResult:
        """Fetch, normalize and (optionally) name-merge the result of a query"""
        try:
            data = self.fetch(query)
        except UpstreamHttpError as e:
            logger.error(f"Overpass request failed for query {query}: {e}")
            return PipelineResult.failed(str(e))

        if self.parser.load(data) is None:
            logger.error(f"No osm features returned for Overpass query: {query}")
            return PipelineResult.no_data("Overpass returned no usable data")

        features = self.parser.to_geojson(data)
        if merge:
            features = self.merger.merge(features)
        return PipelineResult.success(features)

    def waterways_in_bbox(self, bbox: BBox) -> PipelineResult:
        """Merged named waterways inside a bbox"""
        query = queries.waterways_in_bbox_query(bbox, self.config.query.bbox_size_limit_m2)
        return self.fetch_features(query)

    def resolve_area(self, area: Union[int, str]) -> int:
        """Relation id for an area given as relation id or free-text name"""
        if isinstance(area, int) or str(area).strip().isdigit():
            return int(area)
        return self.geocoder.resolve_area_id(str(area))

    def waterways_for_area(self, area: Union[int, str], relations_only: bool = False) -> PipelineResult:
        """
        Merged named waterways inside an administrative area

        Args:
            area: Relation id or free-text area name
            relations_only: Only fetch waterway relations (major waterways)
        """
        try:
            relation_id = self.resolve_area(area)
        except AreaNotFoundError as e:
            logger.warning(str(e))
            return PipelineResult.no_data(str(e))
        except UpstreamHttpError as e:
            logger.error(f"Area lookup for '{area}' failed: {e}")
            return PipelineResult.failed(str(e))

        if relations_only:
            query = queries.waterway_relations_in_area_query(relation_id, self.config.query.osm_area_offset)
        else:
            query = queries.waterways_in_area_query(relation_id, self.config.query.osm_area_offset)
        return self.fetch_features(query)

    def main_waterways_for_area(self, area: Union[int, str]) -> PipelineResult:
        return self.waterways_for_area(area, relations_only=True)

    def place_area_ids(self, bbox: BBox) -> List[int]:
        """
        Relation ids of cities, towns and villages in a bbox

        Raises:
            UpstreamHttpError: the Overpass request failed
        """
        data = self.parser.load(self.fetch(queries.places_in_bbox_query(bbox, self.config.query.place_types)))
        if data is None:
            return []
        return [e["id"] for e in data["elements"] if isinstance(e, dict) and e.get("type") == "relation" and "id" in e]

    def pois_in_relation(self, relation_id: int, tag_filter: str) -> FeatureCollection:
        """Point features matching a tag filter inside a relation"""
        query = queries.pois_in_relation_query(relation_id, tag_filter, self.config.query.osm_area_offset)
        return self.parser.nodes_to_geojson(self.fetch(query))

    def pois_in_circle(self, lat: float, lon: float, radius_m: float, tag_filter: str) -> FeatureCollection:
        return self.parser.nodes_to_geojson(self.fetch(queries.pois_in_circle_query(lat, lon, radius_m, tag_filter)))

    def node(self, node_id: int) -> FeatureCollection:
        return self.parser.nodes_to_geojson(self.fetch(queries.node_query(node_id)))
