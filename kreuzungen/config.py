"""
Configuration settings for Kreuzungen
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple
import os

try:
    from dotenv import load_dotenv
    HAS_DOTENV = True
except ImportError:
    HAS_DOTENV = False


@dataclass
class APIConfig:
    """API endpoints and configuration"""
    # Overpass API (OSM)
    overpass_url: str = "https://overpass-api.de/api/interpreter"
    overpass_timeout: int = 90

    # Geocoding. Photon has more liberal terms of service than Nominatim
    photon_url: str = "https://photon.komoot.io/api/"
    nominatim_url: str = "https://nominatim.openstreetmap.org"

    # Strava REST API
    strava_url: str = "https://www.strava.com/api/v3"

    # Request settings
    request_timeout: int = 30
    max_retries: int = 3
    retry_delay: float = 5.0
    min_request_interval: float = 1.0

    # User agent for API requests
    user_agent: str = "Kreuzungen/0.3"


@dataclass
class QueryConfig:
    """Overpass query shaping"""
    # Above this bbox area only relations (major waterways) are fetched
    bbox_size_limit_m2: float = 10_000_000_000
    # Above this bbox area a "this may take a while" notice is logged
    large_route_warning_m2: float = 50_000_000_000
    # OSM area id = relation id + offset
    osm_area_offset: int = 3_600_000_000
    place_types: Tuple[str, ...] = ("city", "town", "village")


@dataclass
class PipelineConfig:
    """Pipeline configuration"""
    api: APIConfig = field(default_factory=APIConfig)
    query: QueryConfig = field(default_factory=QueryConfig)

    # Raw Overpass responses are cached here when set
    cache_dir: Optional[str] = None

    # Concurrent upstream requests for per-area fan-out
    max_workers: int = 4

    share_base_url: str = "https://kreuzungen.world"
    roulette_base_url: str = "https://whereroulette.com"

    strava_access_token: Optional[str] = None


def _load_env() -> None:
    """Load .env from the project root or the working directory"""
    if not HAS_DOTENV:
        return
    for env_path in (Path(__file__).parent.parent / ".env", Path.cwd() / ".env"):
        if env_path.exists():
            load_dotenv(env_path, override=False)  # Don't override existing env vars
            return


def load_config() -> PipelineConfig:
    """Build configuration from defaults and environment overrides"""
    _load_env()
    cfg = PipelineConfig()
    if os.getenv("KREUZUNGEN_OVERPASS_URL"):
        cfg.api.overpass_url = os.environ["KREUZUNGEN_OVERPASS_URL"]
    if os.getenv("KREUZUNGEN_CACHE_DIR"):
        cfg.cache_dir = os.environ["KREUZUNGEN_CACHE_DIR"]
    cfg.strava_access_token = os.getenv("STRAVA_ACCESS_TOKEN") or None
    return cfg


# Global config instance
config = load_config()


def get_config() -> PipelineConfig:
    """Get global configuration"""
    return config


def validate_config(config: PipelineConfig) -> None:
    """
    Validate that all required configuration values are set.
    Raises ValueError if any required value is missing or invalid.
    """
    errors = []

    if config.api is None:
        errors.append("api configuration is required but not set")
    else:
        if not config.api.overpass_url:
            errors.append("api.overpass_url is required but not set")
        if not config.api.photon_url and not config.api.nominatim_url:
            errors.append("at least one of api.photon_url / api.nominatim_url must be set")
        if config.api.max_retries < 1:
            errors.append(f"api.max_retries must be at least 1, got {config.api.max_retries}")
        if config.api.request_timeout <= 0:
            errors.append(f"api.request_timeout must be positive, got {config.api.request_timeout}")

    if config.query is None:
        errors.append("query configuration is required but not set")
    else:
        if config.query.bbox_size_limit_m2 <= 0:
            errors.append(f"query.bbox_size_limit_m2 must be positive, got {config.query.bbox_size_limit_m2}")
        if config.query.osm_area_offset != 3_600_000_000:
            errors.append(f"query.osm_area_offset must be 3600000000, got {config.query.osm_area_offset}")
        if not config.query.place_types:
            errors.append("query.place_types must not be empty")

    if config.max_workers < 1:
        errors.append(f"max_workers must be at least 1, got {config.max_workers}")

    if errors:
        error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        raise ValueError(error_msg)
