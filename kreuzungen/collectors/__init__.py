"""
Data collectors for Kreuzungen

- WaterwayCollector: waterways, places and POIs from OpenStreetMap
- AreaGeocoder: area names to OSM relation ids
- StravaClient: activity routes and descriptions
"""

from .osm import WaterwayCollector, AreaGeocoder, OverpassAPIClient, OSMResponseParser
from .strava import StravaClient

__all__ = [
    "WaterwayCollector",
    "AreaGeocoder",
    "OverpassAPIClient",
    "OSMResponseParser",
    "StravaClient",
]
