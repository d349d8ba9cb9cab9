"""
Strava API client

Bearer-token pass-through only: token exchange and refresh happen
elsewhere.
"""

import requests
from typing import Dict, Any, Optional
from loguru import logger

from ..config import get_config, APIConfig
from ..errors import RouteDecodeError, UpstreamHttpError
from ..models import Route
from ..routes import decode_polyline


class StravaClient:
    """Reads activity routes and writes activity descriptions"""

    def __init__(self, access_token: str, api_config: Optional[APIConfig] = None,
                 session: Optional[requests.Session] = None):
        if not access_token:
            raise ValueError("A Strava access token is required")
        self.api = api_config or get_config().api
        self.session = session or requests.Session()
        self.headers = {
            "Authorization": f"Bearer {access_token}",
            "User-Agent": self.api.user_agent,
        }

    def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        url = f"{self.api.strava_url.rstrip('/')}/{path.lstrip('/')}"
        try:
            response = self.session.request(
                method, url, headers=self.headers, timeout=self.api.request_timeout, **kwargs
            )
            response.raise_for_status()
            return response.json()
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            raise UpstreamHttpError(f"Strava HTTP error! status: {status}", status_code=status, url=url) from e
        except requests.exceptions.RequestException as e:
            raise UpstreamHttpError(f"Strava request failed: {e}", url=url) from e

    def get_activity(self, activity_id: int) -> Dict[str, Any]:
        return self._request("GET", f"activities/{activity_id}")

    def get_activity_route(self, activity_id: int) -> Route:
        """Activity route from its full (or summary) polyline"""
        activity = self.get_activity(activity_id)
        activity_map = activity.get("map") or {}
        encoded = activity_map.get("polyline") or activity_map.get("summary_polyline")
        if not encoded:
            raise RouteDecodeError(f"Activity {activity_id} has no route polyline")
        return decode_polyline(
            encoded,
            name=activity.get("name"),
            stravaUrl=f"https://www.strava.com/activities/{activity_id}",
        )

    def update_activity_description(self, activity_id: int, description: str) -> Dict[str, Any]:
        logger.info(f"Updating description of Strava activity {activity_id}")
        return self._request("PUT", f"activities/{activity_id}", json={"description": description})
