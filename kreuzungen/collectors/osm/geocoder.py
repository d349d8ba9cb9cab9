"""
Area geocoding

Resolves free-text area names to bare OSM relation ids (the Overpass
area offset is applied by the query builders, not here) and produces
carmen-style search results for area pickers.
"""

import requests
from typing import Dict, Any, List, Optional
from loguru import logger

from ...config import get_config, APIConfig
from ...errors import AreaNotFoundError, UpstreamHttpError


class AreaGeocoder:
    """Photon first, Nominatim as fallback"""

    def __init__(self, api_config: Optional[APIConfig] = None, session: Optional[requests.Session] = None):
        self.api = api_config or get_config().api
        self.session = session or requests.Session()

    def _get(self, url: str, params: Dict[str, Any]) -> Any:
        try:
            response = self.session.get(
                url,
                params=params,
                headers={"User-Agent": self.api.user_agent},
                timeout=self.api.request_timeout
            )
            response.raise_for_status()
            return response.json()
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            raise UpstreamHttpError(f"HTTP error! status: {status}", status_code=status, url=url) from e
        except requests.exceptions.RequestException as e:
            raise UpstreamHttpError(f"Geocoder request failed: {e}", url=url) from e

    def area_id_photon(self, area_name: str) -> Optional[int]:
        data = self._get(self.api.photon_url, {"q": area_name, "limit": 1})
        features = (data or {}).get("features") or []
        if not features:
            return None
        properties = features[0].get("properties", {})
        # osm_type is N, W or R; only relations have areas
        if properties.get("osm_type") not in (None, "R"):
            logger.warning(f"Photon match for '{area_name}' is osm_type {properties.get('osm_type')}, not a relation")
        return properties.get("osm_id")

    def area_id_nominatim(self, area_name: str) -> Optional[int]:
        data = self._get(
            f"{self.api.nominatim_url.rstrip('/')}/search",
            {"format": "json", "limit": 1, "q": area_name}
        )
        if not data:
            return None
        return data[0].get("osm_id")

    def resolve_area_id(self, area_name: str) -> int:
        """
        OSM relation id for an area name

        Raises:
            AreaNotFoundError: neither geocoder knows the name
            UpstreamHttpError: both geocoders failed
        """
        errors = []
        lookups = []
        if self.api.photon_url:
            lookups.append(("photon", self.area_id_photon))
        if self.api.nominatim_url:
            lookups.append(("nominatim", self.area_id_nominatim))

        for source, lookup in lookups:
            try:
                osm_id = lookup(area_name)
            except UpstreamHttpError as e:
                logger.warning(f"{source} lookup for '{area_name}' failed: {e}")
                errors.append(e)
                continue
            if osm_id is not None:
                logger.debug(f"Resolved '{area_name}' to relation {osm_id} via {source}")
                return int(osm_id)

        if errors and len(errors) == len(lookups):
            raise errors[-1]
        raise AreaNotFoundError(f"No OSM area found for '{area_name}'")

    def search(self, query: str, limit: int = 5) -> List[Dict[str, Any]]:
        """Carmen GeoJSON features (place_name, center, bbox) for a free-text query"""
        data = self._get(self.api.photon_url, {"q": query, "limit": limit})
        results = []
        for feature in (data or {}).get("features") or []:
            properties = feature.get("properties", {})
            coords = (feature.get("geometry") or {}).get("coordinates")
            labels = [properties.get(k) for k in ("name", "city", "state", "country")]
            place_name = ", ".join(dict.fromkeys(label for label in labels if label))
            carmen = {
                "type": "Feature",
                "geometry": feature.get("geometry"),
                "place_name": place_name,
                "text": properties.get("name", place_name),
                "place_type": ["place"],
                "center": coords,
                "properties": properties,
            }
            extent = properties.get("extent")
            if extent and len(extent) == 4:
                # Photon extent is [min_lon, max_lat, max_lon, min_lat]
                carmen["bbox"] = [extent[0], extent[3], extent[2], extent[1]]
            results.append(carmen)
        return results
