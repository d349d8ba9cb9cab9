"""
POI roulette: pick a random place of a category inside a region

Shares the Overpass client and node normalizer with the waterway
pipeline.
"""

import random
from enum import Enum
from typing import Dict, Optional, Union
from urllib.parse import quote
from loguru import logger

from .collectors.osm.collector import WaterwayCollector
from .config import get_config, PipelineConfig
from .errors import InvalidCategoryError, POINotFoundError
from .models import Feature, FeatureCollection, POIChoice


class Category(str, Enum):
    DRINKS = "drinks"
    CAFE = "cafe"
    FOOD = "food"
    PARK = "park"
    CLIMB = "climb"


CATEGORIES: Dict[Category, Dict[str, str]] = {
    Category.DRINKS: {"tag": 'amenity~"^(pub|bar|biergarten)$"', "emoji": "🍺"},
    Category.CAFE: {"tag": 'amenity~"^(cafe)$"', "emoji": "☕"},
    Category.FOOD: {"tag": 'amenity~"^(restaurant|fast_food|food_court|ice_cream)$"', "emoji": "🍴"},
    Category.PARK: {"tag": 'leisure~"^(park|garden)$"', "emoji": "🌳"},
    Category.CLIMB: {"tag": 'sport~"^(climbing|bouldering)$"', "emoji": "🧗"},
}


def parse_category(name: Union[str, Category, None]) -> Category:
    try:
        return Category(name or Category.DRINKS)
    except ValueError:
        valid = ", ".join(c.value for c in Category)
        raise InvalidCategoryError(f"Invalid type. Must be one of: {valid}") from None


class POIRoulette:
    """Random POI picker backed by Overpass"""

    def __init__(
        self,
        collector: Optional[WaterwayCollector] = None,
        config: Optional[PipelineConfig] = None,
        rng: Optional[random.Random] = None,
    ):
        self.config = config or get_config()
        self.collector = collector or WaterwayCollector(self.config)
        self.rng = rng or random.Random()

    def candidates(self, region: Union[int, str], category: Category) -> FeatureCollection:
        return self.collector.pois_in_relation(int(region), CATEGORIES[category]["tag"])

    def nearby(self, lat: float, lon: float, radius_m: float, category: Union[str, Category]) -> FeatureCollection:
        category = parse_category(category)
        return self.collector.pois_in_circle(lat, lon, radius_m, CATEGORIES[category]["tag"])

    def choose(
        self,
        region: Union[int, str, None],
        category: Union[str, Category, None] = Category.DRINKS,
        node_id: Optional[str] = None,
    ) -> POIChoice:
        """
        Pick a random POI of a category in a region, or look up a specific node

        Raises:
            ValueError: region is missing
            InvalidCategoryError: unknown category
            POINotFoundError: nothing matched
            UpstreamHttpError: Overpass request failed
        """
        if not region:
            raise ValueError("Missing required parameter: region")
        category = parse_category(category)

        if node_id:
            numeric_id = str(node_id).split("/")[-1]
            features = self.collector.node(int(numeric_id)).features
            if not features:
                raise POINotFoundError(f"Node with ID {node_id} not found")
            selected = features[0]
        else:
            features = self.candidates(region, category).features
            if not features:
                raise POINotFoundError(f"No {category.value} found in region {region}")
            selected = self.rng.choice(features)
            logger.info(f"Picked {selected.id} out of {len(features)} {category.value} POIs in region {region}")

        return self._to_choice(selected, region, category)

    def _to_choice(self, feature: Feature, region: Union[int, str], category: Category) -> POIChoice:
        osm_id = str(feature.properties.get("id") or feature.id or "")
        osm_node = osm_id.split("/")[1] if "/" in osm_id else osm_id
        base_url = self.config.roulette_base_url.rstrip("/")
        return POIChoice(
            osm_node=osm_node,
            name=feature.properties.get("name") or "Unnamed location",
            type=category.value,
            emoji=CATEGORIES[category]["emoji"],
            opening_hours=feature.properties.get("opening_hours"),
            url=f"{base_url}/?region={region}&type={category.value}&id={quote(osm_id, safe='')}",
            geojson=feature,
        )
