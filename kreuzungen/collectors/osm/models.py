"""
OSM data models

Data classes for representing OSM nodes, ways and relations
"""

from typing import List, Dict, Optional
from dataclasses import dataclass, field


Coordinates = List[List[float]]


@dataclass
class OSMNode:
    """Represents an OSM node (point)"""
    id: int
    lat: float
    lon: float
    tags: Dict[str, str] = field(default_factory=dict)

    def get_coordinates(self) -> List[float]:
        return [self.lon, self.lat]


@dataclass
class OSMWay:
    """Represents an OSM way (line or polygon)"""
    id: int
    nodes: List[OSMNode]
    tags: Dict[str, str]
    # Direct geometry from Overpass, split into runs at missing vertices
    geometry: Optional[List[Coordinates]] = None

    def get_parts(self) -> List[Coordinates]:
        """Coordinate runs as [lon, lat] lists"""
        # Prefer direct geometry if available (from 'out geom')
        if self.geometry:
            return self.geometry
        # Fallback to node-based coordinates
        return [[[n.lon, n.lat] for n in self.nodes]]

    def is_closed(self) -> bool:
        parts = self.get_parts()
        return len(parts) == 1 and len(parts[0]) >= 4 and parts[0][0] == parts[0][-1]


@dataclass
class OSMMember:
    """Relation member; way members carry geometry runs with 'out geom'"""
    type: str
    ref: int
    role: str = ""
    geometry: Optional[List[Coordinates]] = None


@dataclass
class OSMRelation:
    """Represents an OSM relation (group of ways and nodes)"""
    id: int
    tags: Dict[str, str]
    members: List[OSMMember] = field(default_factory=list)

    def way_members(self) -> List[OSMMember]:
        return [m for m in self.members if m.type == "way"]
