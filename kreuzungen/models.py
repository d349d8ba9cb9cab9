"""
Pydantic models for Kreuzungen data structures

GeoJSON value objects flow between pipeline stages; every stage returns
new instances instead of mutating its input.
"""

from enum import Enum
from typing import List, Optional, Dict, Any, Iterable, Literal, Tuple, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator


BBox = Tuple[float, float, float, float]  # (min_lon, min_lat, max_lon, max_lat)


# ============================================================
# GeoJSON Types
# ============================================================

class Feature(BaseModel):
    """GeoJSON Feature; properties carry OSM tags verbatim"""
    model_config = ConfigDict(frozen=True)

    type: Literal["Feature"] = "Feature"
    id: Optional[Union[int, str]] = None
    geometry: Optional[Dict[str, Any]] = None
    properties: Dict[str, Any] = Field(default_factory=dict)

    @property
    def name(self) -> Optional[str]:
        return self.properties.get("name") or None

    @property
    def geometry_type(self) -> Optional[str]:
        return self.geometry.get("type") if self.geometry else None

    def with_properties(self, **updates: Any) -> "Feature":
        return self.model_copy(update={"properties": {**self.properties, **updates}})


class FeatureCollection(BaseModel):
    """Ordered sequence of features"""
    model_config = ConfigDict(frozen=True)

    type: Literal["FeatureCollection"] = "FeatureCollection"
    features: List[Feature] = Field(default_factory=list)

    def __len__(self) -> int:
        return len(self.features)

    @classmethod
    def of(cls, features: Iterable[Feature]) -> "FeatureCollection":
        return cls(features=list(features))

    @classmethod
    def from_geojson(cls, data: Dict[str, Any]) -> "FeatureCollection":
        return cls.model_validate(data)

    def to_geojson(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")


class Route(Feature):
    """A Feature whose LineString coordinates run from start to end"""

    geometry: Dict[str, Any]

    @field_validator("geometry")
    @classmethod
    def _require_linestring(cls, geometry: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        if not geometry or geometry.get("type") != "LineString":
            raise ValueError("Route geometry must be a LineString")
        if len(geometry.get("coordinates") or []) < 2:
            raise ValueError("Route must have at least two coordinates")
        return geometry

    @property
    def coordinates(self) -> List[List[float]]:
        return self.geometry["coordinates"]

    @property
    def start(self) -> List[float]:
        return self.coordinates[0]

    @classmethod
    def from_coordinates(cls, coords: Iterable[Iterable[float]], **properties: Any) -> "Route":
        return cls(
            geometry={"type": "LineString", "coordinates": [list(c)[:2] for c in coords]},
            properties={k: v for k, v in properties.items() if v is not None},
        )


# ============================================================
# Pipeline Results
# ============================================================

class ResultStatus(str, Enum):
    SUCCESS = "success"   # collection present, possibly empty
    NO_DATA = "no_data"   # upstream returned nothing usable
    FAILED = "failed"     # upstream request failed


class PipelineResult(BaseModel):
    """Explicit outcome of a pipeline entry point"""
    model_config = ConfigDict(frozen=True)

    status: ResultStatus
    features: FeatureCollection = Field(default_factory=FeatureCollection)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == ResultStatus.SUCCESS

    @property
    def is_empty(self) -> bool:
        return self.ok and len(self.features) == 0

    @classmethod
    def success(cls, features: FeatureCollection) -> "PipelineResult":
        return cls(status=ResultStatus.SUCCESS, features=features)

    @classmethod
    def no_data(cls, reason: Optional[str] = None) -> "PipelineResult":
        return cls(status=ResultStatus.NO_DATA, error=reason)

    @classmethod
    def failed(cls, reason: str) -> "PipelineResult":
        return cls(status=ResultStatus.FAILED, error=reason)


# ============================================================
# POI Roulette
# ============================================================

class POIChoice(BaseModel):
    osm_node: str
    name: str
    type: str
    emoji: str
    opening_hours: Optional[str] = None
    url: str
    geojson: Optional[Feature] = None
