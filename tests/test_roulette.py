import random
from unittest.mock import Mock

import pytest

from kreuzungen.collectors.osm.collector import WaterwayCollector
from kreuzungen.errors import InvalidCategoryError, POINotFoundError
from kreuzungen.models import Feature, FeatureCollection
from kreuzungen.roulette import CATEGORIES, Category, POIRoulette, parse_category


def poi(node_id, **tags):
    osm_id = f"node/{node_id}"
    return Feature(
        id=osm_id,
        geometry={"type": "Point", "coordinates": [12.37, 51.34]},
        properties={**tags, "id": osm_id},
    )


@pytest.fixture
def collector():
    return Mock(spec=WaterwayCollector)


def test_parse_category():
    assert parse_category(None) is Category.DRINKS
    assert parse_category("cafe") is Category.CAFE
    assert parse_category(Category.PARK) is Category.PARK
    with pytest.raises(InvalidCategoryError, match="Must be one of: drinks, cafe, food, park, climb"):
        parse_category("museum")


def test_choose_random_poi(config, collector):
    candidates = [poi(1, name="Kaffeehaus Riquet"), poi(2, name="Café Grundmann")]
    collector.pois_in_relation.return_value = FeatureCollection.of(candidates)
    choice = POIRoulette(collector, config, rng=random.Random(7)).choose("62649", "cafe")

    collector.pois_in_relation.assert_called_once_with(62649, CATEGORIES[Category.CAFE]["tag"])
    assert choice.geojson in candidates
    assert choice.type == "cafe"
    assert choice.emoji == "☕"
    assert choice.url == f"https://whereroulette.com/?region=62649&type=cafe&id=node%2F{choice.osm_node}"


def test_choose_specific_node(config, collector):
    collector.node.return_value = FeatureCollection.of([poi(42, opening_hours="Mo-Fr 08:00-18:00")])
    choice = POIRoulette(collector, config).choose(62649, "drinks", node_id="node/42")

    collector.node.assert_called_once_with(42)
    collector.pois_in_relation.assert_not_called()
    assert choice.osm_node == "42"
    assert choice.name == "Unnamed location"
    assert choice.opening_hours == "Mo-Fr 08:00-18:00"


def test_region_required(config, collector):
    with pytest.raises(ValueError, match="region"):
        POIRoulette(collector, config).choose(None, "cafe")


def test_nothing_found(config, collector):
    collector.pois_in_relation.return_value = FeatureCollection()
    with pytest.raises(POINotFoundError):
        POIRoulette(collector, config).choose(62649, "climb")


def test_missing_node(config, collector):
    collector.node.return_value = FeatureCollection()
    with pytest.raises(POINotFoundError):
        POIRoulette(collector, config).choose(62649, node_id="7")


def test_nearby(config, collector):
    collector.pois_in_circle.return_value = FeatureCollection.of([poi(3)])
    assert len(POIRoulette(collector, config).nearby(51.34, 12.37, 500, "park")) == 1
    collector.pois_in_circle.assert_called_once_with(51.34, 12.37, 500, CATEGORIES[Category.PARK]["tag"])
