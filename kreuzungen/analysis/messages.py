"""
Human-readable summaries of crossed waterways

The summary string is pasted into Strava activity descriptions; keep
its wording stable.
"""

from typing import List

from ..models import FeatureCollection


SITE_URL = "https://kreuzungen.world"


def waterway_names(fc: FeatureCollection) -> List[str]:
    """Names in collection order, unnamed features skipped"""
    return [f.name for f in fc.features if f.name]


def create_waterways_message(fc: FeatureCollection) -> str:
    names = [str(f.properties.get("name")) for f in fc.features]
    if len(names) > 1:
        return f"Crossed {len(names)} waterways 🏞️ {' | '.join(names)} 🌐 {SITE_URL} 🗺️"
    if len(names) == 1:
        return f"Crossed 1 waterway 🏞️ {names[0]} 🌐 {SITE_URL} 🗺️"
    return f"Crossed 0 waterways 🌐 {SITE_URL} 🗺️"
