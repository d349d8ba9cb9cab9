"""
OpenStreetMap data collection module

Modular OSM data collector with separate components for:
- API client: Overpass API communication
- Geocoder: area name to relation id (Photon / Nominatim)
- Queries: Overpass QL builders
- Models: Data structures (OSMNode, OSMWay, OSMRelation)
- Parser: Response parsing and GeoJSON normalization
- Cache: Caching functionality
- Collector: Main orchestrator class
"""

from .models import OSMNode, OSMWay, OSMRelation, OSMMember
from .parser import OSMResponseParser
from .geocoder import AreaGeocoder
from .api_client import OverpassAPIClient
from .collector import WaterwayCollector

__all__ = [
    "OSMNode",
    "OSMWay",
    "OSMRelation",
    "OSMMember",
    "OSMResponseParser",
    "AreaGeocoder",
    "OverpassAPIClient",
    "WaterwayCollector",
]
