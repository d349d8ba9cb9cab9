"""
Overpass API client

Handles communication with Overpass API including:
- Rate limiting (shared across threads)
- Retry on timeouts and 429/504 answers
- Error handling
"""

import threading
import time
import requests
from typing import Dict, Any, Optional
from loguru import logger

from ...config import get_config, APIConfig
from ...errors import UpstreamHttpError


class OverpassAPIClient:
    """Client for interacting with Overpass API"""

    def __init__(self, api_config: Optional[APIConfig] = None, session: Optional[requests.Session] = None):
        self.api = api_config or get_config().api
        self.overpass_url = self.api.overpass_url
        self.timeout = self.api.overpass_timeout
        self.session = session or requests.Session()
        self._last_request_time = 0.0
        self._lock = threading.Lock()

    def _rate_limit(self):
        """Ensure we don't exceed rate limits"""
        with self._lock:
            elapsed = time.time() - self._last_request_time
            if elapsed < self.api.min_request_interval:
                time.sleep(self.api.min_request_interval - elapsed)
            self._last_request_time = time.time()

    def query(self, query: str) -> Optional[Dict[str, Any]]:
        """
        Execute Overpass API query with retry logic

        Args:
            query: Overpass QL query string

        Returns:
            Parsed JSON response, or None when the body is not JSON

        Raises:
            UpstreamHttpError: If the query fails after all retries
        """
        headers = {
            "User-Agent": self.api.user_agent,
            "Accept": "application/json",
            "Content-Type": "application/x-www-form-urlencoded"
        }
        max_retries = self.api.max_retries
        retry_delay = self.api.retry_delay

        for attempt in range(max_retries):
            self._rate_limit()
            try:
                response = self.session.post(
                    self.overpass_url,
                    data={"data": query},
                    headers=headers,
                    timeout=self.timeout
                )
                response.raise_for_status()
            except requests.exceptions.Timeout as e:
                wait_time = retry_delay * (attempt + 1)
                if attempt < max_retries - 1:
                    logger.warning(f"Overpass timeout (attempt {attempt + 1}/{max_retries}). Retrying in {wait_time}s...")
                    time.sleep(wait_time)
                    continue
                logger.error(f"Overpass timeout after {max_retries} attempts")
                raise UpstreamHttpError(f"Overpass API timeout after {max_retries} attempts", url=self.overpass_url) from e
            except requests.exceptions.HTTPError as e:
                status = e.response.status_code if e.response is not None else None
                if status in (429, 504) and attempt < max_retries - 1:
                    wait_time = retry_delay * (attempt + 1)
                    logger.warning(f"Overpass {status} (attempt {attempt + 1}/{max_retries}). Retrying in {wait_time}s...")
                    time.sleep(wait_time)
                    continue
                logger.error(f"Overpass HTTP error {status}")
                raise UpstreamHttpError(f"HTTP error! status: {status}", status_code=status, url=self.overpass_url) from e
            except requests.exceptions.RequestException as e:
                logger.error(f"Overpass request failed: {e}")
                raise UpstreamHttpError(f"Overpass API request failed: {e}", url=self.overpass_url) from e

            try:
                return response.json()
            except ValueError as e:
                logger.warning(f"Overpass returned a non-JSON body: {e}")
                return None

        return None
