import pytest

from kreuzungen import config as config_module
from kreuzungen.config import PipelineConfig, load_config, validate_config


def test_defaults_are_valid():
    validate_config(PipelineConfig())


def test_default_constants():
    cfg = PipelineConfig()
    assert cfg.query.bbox_size_limit_m2 == 1e10
    assert cfg.query.large_route_warning_m2 == 5e10
    assert cfg.query.osm_area_offset == 3600000000
    assert cfg.query.place_types == ("city", "town", "village")


def test_validate_collects_every_problem():
    cfg = PipelineConfig()
    cfg.api.overpass_url = ""
    cfg.api.max_retries = 0
    cfg.max_workers = 0
    with pytest.raises(ValueError) as excinfo:
        validate_config(cfg)
    message = str(excinfo.value)
    assert "api.overpass_url" in message
    assert "api.max_retries" in message
    assert "max_workers" in message


def test_env_overrides(monkeypatch, tmp_path):
    monkeypatch.setattr(config_module, "_load_env", lambda: None)
    monkeypatch.setenv("KREUZUNGEN_OVERPASS_URL", "https://overpass.example/api/interpreter")
    monkeypatch.setenv("KREUZUNGEN_CACHE_DIR", str(tmp_path))
    monkeypatch.setenv("STRAVA_ACCESS_TOKEN", "secret")
    cfg = load_config()
    assert cfg.api.overpass_url == "https://overpass.example/api/interpreter"
    assert cfg.cache_dir == str(tmp_path)
    assert cfg.strava_access_token == "secret"


def test_env_defaults(monkeypatch):
    monkeypatch.setattr(config_module, "_load_env", lambda: None)
    for name in ("KREUZUNGEN_OVERPASS_URL", "KREUZUNGEN_CACHE_DIR", "STRAVA_ACCESS_TOKEN"):
        monkeypatch.delenv(name, raising=False)
    cfg = load_config()
    assert cfg.api.overpass_url == "https://overpass-api.de/api/interpreter"
    assert cfg.cache_dir is None
    assert cfg.strava_access_token is None
