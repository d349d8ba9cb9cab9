"""Shared fixtures: a west-to-east route near 51°N and canned Overpass responses"""

import json
from typing import Any, Dict, List, Optional

import pytest
import requests
from loguru import logger

from kreuzungen.config import PipelineConfig
from kreuzungen.errors import UpstreamHttpError
from kreuzungen.models import Feature, FeatureCollection, Route


def osm_way(way_id: int, coords: List[List[float]], **tags) -> Dict[str, Any]:
    """Overpass 'out geom' way element"""
    return {
        "type": "way",
        "id": way_id,
        "tags": tags,
        "geometry": [{"lat": lat, "lon": lon} for lon, lat in coords],
    }


def osm_relation(relation_id: int, members: List[List[List[float]]], **tags) -> Dict[str, Any]:
    return {
        "type": "relation",
        "id": relation_id,
        "tags": tags,
        "members": [
            {
                "type": "way",
                "ref": 9000 + i,
                "role": "main_stream",
                "geometry": [{"lat": lat, "lon": lon} for lon, lat in coords],
            }
            for i, coords in enumerate(members)
        ],
    }


def vertical(lon: float, south: float = 50.95, north: float = 51.05) -> List[List[float]]:
    """North-south line at a longitude, crossing the route"""
    return [[lon, south], [lon, north]]


def line_feature(fid: str, coords: List[List[float]], **properties) -> Feature:
    return Feature(id=fid, geometry={"type": "LineString", "coordinates": coords}, properties={"id": fid, **properties})


def make_response(status: int, payload: Any = None, text: Optional[str] = None) -> requests.Response:
    response = requests.Response()
    response.status_code = status
    response.url = "https://overpass.test/api/interpreter"
    if text is not None:
        response._content = text.encode("utf-8")
    else:
        response._content = json.dumps(payload).encode("utf-8")
    return response


class FakeOverpassClient:
    """Stands in for OverpassAPIClient: canned responses keyed by query substring"""

    def __init__(self, responses: Optional[Dict[str, Any]] = None, default: Any = None, error: Optional[Exception] = None):
        self.responses = responses or {}
        self.default = default
        self.error = error
        self.queries: List[str] = []

    def query(self, query: str):
        self.queries.append(query)
        if self.error is not None:
            raise self.error
        for needle, response in self.responses.items():
            if needle in query:
                return response
        return self.default


@pytest.fixture
def config() -> PipelineConfig:
    cfg = PipelineConfig()
    cfg.api.retry_delay = 0
    cfg.api.min_request_interval = 0
    return cfg


@pytest.fixture
def route() -> Route:
    return Route.from_coordinates([[10.0, 51.0], [10.1, 51.0]], name="Test Ride")


@pytest.fixture
def waterways_response() -> Dict[str, Any]:
    """Thames crosses once, Avon is split into two crossing ways, Dry Creek stays north"""
    return {
        "elements": [
            osm_way(1, vertical(10.05), waterway="river", name="Thames"),
            osm_way(2, vertical(10.02), waterway="river", name="Avon"),
            osm_way(3, vertical(10.08), waterway="river", name="Avon"),
            osm_way(4, [[10.03, 51.02], [10.04, 51.03]], waterway="stream", name="Dry Creek"),
            osm_way(5, vertical(10.06), waterway="ditch"),
        ]
    }


@pytest.fixture
def http_error() -> UpstreamHttpError:
    return UpstreamHttpError("HTTP error! status: 500", status_code=500)


@pytest.fixture
def empty_fc() -> FeatureCollection:
    return FeatureCollection()


@pytest.fixture
def log_messages():
    """Messages logged through loguru while the test runs"""
    messages: List[str] = []
    handler_id = logger.add(lambda message: messages.append(message.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)
