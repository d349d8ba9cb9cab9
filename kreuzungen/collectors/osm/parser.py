"""
OSM response parser

Parses Overpass API responses into OSM models and normalizes them into
GeoJSON features: ways become LineStrings (Polygons for closed area
ways), relations become MultiLineStrings built from their way members,
and tagged nodes become Points.
"""

import json
import math
from typing import Dict, Any, Tuple, List, Optional, Union
from loguru import logger
from shapely.errors import ShapelyError
from shapely.geometry import MultiLineString
from shapely.ops import linemerge

from ...models import Feature, FeatureCollection
from .models import Coordinates, OSMNode, OSMWay, OSMRelation, OSMMember


RawOSM = Union[Dict[str, Any], str, bytes, None]

# Tags that do not make an element worth a feature of its own
UNINTERESTING_TAGS = {
    "source", "source_ref", "source:ref", "history", "attribution",
    "created_by", "tiger:county", "tiger:tlid", "tiger:upload_uuid",
}

# Closed ways with these tags describe areas rather than lines
AREA_TAGS = {
    "waterway": {"riverbank", "dock", "boatyard", "dam"},
    "natural": {"water", "wetland", "bay"},
    "landuse": {"reservoir", "basin"},
}


def has_interesting_tags(tags: Optional[Dict[str, str]]) -> bool:
    return any(key not in UNINTERESTING_TAGS for key in (tags or {}))


def _tags(raw: Any) -> Dict[str, Any]:
    return raw if isinstance(raw, dict) else {}


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def _vertex(raw: Any) -> Optional[List[float]]:
    """[lon, lat] of an Overpass {lat, lon} object or a coordinate pair; None when unusable"""
    if isinstance(raw, dict):
        lon, lat = raw.get("lon"), raw.get("lat")
    elif isinstance(raw, (list, tuple)) and len(raw) >= 2:
        lon, lat = raw[0], raw[1]
    else:
        return None
    if _is_number(lon) and _is_number(lat):
        return [lon, lat]
    return None


def _geometry_from_overpass(raw: Any, owner: str) -> Optional[List[Coordinates]]:
    """
    Overpass 'out geom' geometry as [lon, lat] runs

    Missing (null) or non-numeric vertices split the line instead of
    joining its neighbours across the gap.
    """
    if not isinstance(raw, list):
        return None
    runs: List[Coordinates] = [[]]
    gaps = 0
    for node in raw:
        coord = _vertex(node)
        if coord is None:
            gaps += 1
            if runs[-1]:
                runs.append([])
            continue
        runs[-1].append(coord)
    if gaps:
        logger.warning(f"{owner}: {gaps} missing or invalid vertices, splitting the line at them")
    return [run for run in runs if run]


class OSMResponseParser:
    """Parses Overpass API responses"""

    @staticmethod
    def load(data: RawOSM) -> Optional[Dict[str, Any]]:
        """Decode a raw response; None when it is empty or not an Overpass document"""
        if not data:
            return None
        if isinstance(data, (str, bytes)):
            try:
                data = json.loads(data)
            except ValueError as e:
                logger.warning(f"Overpass response is not valid JSON: {e}")
                return None
        if not isinstance(data, dict) or not isinstance(data.get("elements"), list):
            logger.warning("Overpass response has no 'elements' list")
            return None
        return data

    @staticmethod
    def parse_elements(data: Dict[str, Any]) -> Tuple[Dict[int, OSMNode], List[OSMWay], List[OSMRelation]]:
        """
        Parse Overpass response into nodes, ways and relations

        Handles both 'out body' (node references) and 'out geom' (direct geometry) formats.
        Elements missing required keys are skipped.

        Args:
            data: JSON response from Overpass API

        Returns:
            Tuple of (nodes dict, ways list, relations list)
        """
        nodes = {}
        ways = []
        relations = []

        for element in data.get("elements", []):
            try:
                element_type = element["type"]
                if element_type == "node":
                    if _vertex(element) is None:
                        raise TypeError("node lat/lon must be numbers")
                    nodes[element["id"]] = OSMNode(
                        id=element["id"],
                        lat=element["lat"],
                        lon=element["lon"],
                        tags=_tags(element.get("tags"))
                    )
                elif element_type == "way":
                    # Build node list (for 'out body' format)
                    way_nodes = [nodes[n] for n in element.get("nodes", []) if n in nodes]
                    ways.append(OSMWay(
                        id=element["id"],
                        nodes=way_nodes,
                        tags=_tags(element.get("tags")),
                        geometry=_geometry_from_overpass(element.get("geometry"), f"Way {element['id']}")
                    ))
                elif element_type == "relation":
                    members = [
                        OSMMember(
                            type=m["type"],
                            ref=m["ref"],
                            role=m.get("role", ""),
                            geometry=_geometry_from_overpass(m.get("geometry"), f"Relation {element['id']} member {m['ref']}")
                        )
                        for m in element.get("members", [])
                    ]
                    relations.append(OSMRelation(
                        id=element["id"],
                        tags=_tags(element.get("tags")),
                        members=members
                    ))
            except (KeyError, TypeError) as e:
                logger.warning(f"Skipping malformed OSM element {element!r:.120}: {e}")

        return nodes, ways, relations

    @staticmethod
    def to_geojson(data: RawOSM, keep_untagged_nodes: bool = False) -> FeatureCollection:
        """
        Normalize an Overpass response into a FeatureCollection

        Each way and relation becomes one feature with its tags copied into
        properties and a stable id ("way/123", "relation/456"). Ways that
        only serve as untagged relation members are folded into their
        relation. Never raises: an empty or malformed response yields an
        empty collection.
        """
        doc = OSMResponseParser.load(data)
        if doc is None:
            return FeatureCollection()

        nodes, ways, relations = OSMResponseParser.parse_elements(doc)
        ways_by_id = {w.id: w for w in ways}
        member_way_ids = {m.ref for r in relations for m in r.way_members()}

        features = []
        for node in nodes.values():
            if keep_untagged_nodes or has_interesting_tags(node.tags):
                features.append(OSMResponseParser.node_to_feature(node))

        for way in ways:
            if way.id in member_way_ids and not has_interesting_tags(way.tags):
                continue
            feature = OSMResponseParser.way_to_feature(way)
            if feature is not None:
                features.append(feature)

        for relation in relations:
            feature = OSMResponseParser.relation_to_feature(relation, ways_by_id)
            if feature is not None:
                features.append(feature)

        return FeatureCollection.of(features)

    @staticmethod
    def nodes_to_geojson(data: RawOSM) -> FeatureCollection:
        """POI path: every node becomes a Point feature, ways and relations are ignored"""
        doc = OSMResponseParser.load(data)
        if doc is None:
            return FeatureCollection()
        nodes, _, _ = OSMResponseParser.parse_elements(doc)
        return FeatureCollection.of(OSMResponseParser.node_to_feature(n) for n in nodes.values())

    @staticmethod
    def node_to_feature(node: OSMNode) -> Feature:
        osm_id = f"node/{node.id}"
        return Feature(
            id=osm_id,
            geometry={"type": "Point", "coordinates": node.get_coordinates()},
            properties={**node.tags, "id": osm_id},
        )

    @staticmethod
    def way_to_feature(way: OSMWay) -> Optional[Feature]:
        parts = [p for p in way.get_parts() if len(p) >= 2]
        if not parts:
            logger.warning(f"Way {way.id} has fewer than two resolvable coordinates, dropping it")
            return None

        osm_id = f"way/{way.id}"
        if len(parts) > 1:
            geometry = {"type": "MultiLineString", "coordinates": parts}
        elif way.is_closed() and OSMResponseParser._is_area(way.tags):
            geometry = {"type": "Polygon", "coordinates": parts}
        else:
            geometry = {"type": "LineString", "coordinates": parts[0]}
        return Feature(id=osm_id, geometry=geometry, properties={**way.tags, "id": osm_id})

    @staticmethod
    def relation_to_feature(relation: OSMRelation, ways_by_id: Dict[int, OSMWay]) -> Optional[Feature]:
        lines: List[Coordinates] = []
        for member in relation.way_members():
            parts = member.geometry
            if not parts and member.ref in ways_by_id:
                parts = ways_by_id[member.ref].get_parts()
            usable = [p for p in parts or [] if len(p) >= 2]
            if not usable:
                logger.warning(f"Relation {relation.id}: cannot resolve geometry of way member {member.ref}")
                continue
            lines.extend(usable)

        if not lines:
            logger.warning(f"Relation {relation.id} ({relation.tags.get('name')}) has no resolvable way members, dropping it")
            return None

        # Stitch consecutive member ways into continuous lines
        try:
            merged = linemerge(MultiLineString(lines))
        except (ValueError, TypeError, ShapelyError) as e:
            logger.warning(f"Relation {relation.id}: cannot stitch member ways ({e}), dropping it")
            return None
        parts = [merged] if merged.geom_type == "LineString" else list(merged.geoms)
        osm_id = f"relation/{relation.id}"
        return Feature(
            id=osm_id,
            geometry={
                "type": "MultiLineString",
                "coordinates": [[list(c) for c in part.coords] for part in parts],
            },
            properties={**relation.tags, "id": osm_id},
        )

    @staticmethod
    def _is_area(tags: Dict[str, str]) -> bool:
        if tags.get("area") == "no":
            return False
        if tags.get("area") == "yes":
            return True
        return any(isinstance(tags.get(key), str) and tags[key] in values for key, values in AREA_TAGS.items())
