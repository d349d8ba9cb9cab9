"""
Kreuzungen - reveal the waterways a route crosses

Layers:
- collectors: Overpass, geocoder and Strava access, OSM-to-GeoJSON normalization
- analysis: merging, intersection, ordering and completion over GeoJSON
- pipeline: route-level orchestration with explicit result status
"""

__version__ = "0.3.0"
