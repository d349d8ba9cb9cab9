"""
Overpass response cache

Raw responses are stored on disk next to the query text that produced
them, one JSON file per query.
"""

import json
import hashlib
from pathlib import Path
from typing import Dict, Any, Optional
from loguru import logger


class OSMCache:
    """Disk cache of raw Overpass responses keyed by query text"""

    def __init__(self, cache_dir: Optional[str] = None):
        self.cache_dir = Path(cache_dir) if cache_dir else None

    @property
    def enabled(self) -> bool:
        return self.cache_dir is not None

    def path_for(self, query: str) -> Path:
        digest = hashlib.md5(query.strip().encode("utf-8")).hexdigest()[:12]
        return self.cache_dir / f"overpass_{digest}.json"

    def get(self, query: str) -> Optional[Dict[str, Any]]:
        """Cached response for a query, None on a miss"""
        if not self.enabled:
            return None
        path = self.path_for(query)
        if not path.exists():
            return None
        try:
            entry = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to load cache {path}: {e}")
            return None
        if entry.get("query") != query.strip():
            logger.warning(f"Cache entry {path.name} belongs to another query, ignoring it")
            return None
        logger.info(f"Loaded Overpass response from cache: {path.name}")
        return entry.get("response")

    def put(self, query: str, response: Dict[str, Any]):
        if not self.enabled:
            return
        path = self.path_for(query)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(
                json.dumps({"query": query.strip(), "response": response}, ensure_ascii=False),
                encoding="utf-8",
            )
            logger.debug(f"Saved Overpass response to cache: {path.name}")
        except OSError as e:
            logger.warning(f"Failed to save cache {path}: {e}")
