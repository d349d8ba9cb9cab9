from kreuzungen.analysis.messages import create_waterways_message, waterway_names
from kreuzungen.models import FeatureCollection

from conftest import line_feature, vertical


def test_plural_message():
    fc = FeatureCollection.of([
        line_feature("way/1", vertical(10.0), name="Nile"),
        line_feature("way/2", vertical(10.1), name="Amazon River"),
    ])
    assert create_waterways_message(fc) == (
        "Crossed 2 waterways 🏞️ Nile | Amazon River 🌐 https://kreuzungen.world 🗺️"
    )


def test_singular_message():
    fc = FeatureCollection.of([line_feature("way/1", vertical(10.0), name="Elster")])
    assert create_waterways_message(fc) == "Crossed 1 waterway 🏞️ Elster 🌐 https://kreuzungen.world 🗺️"


def test_empty_message():
    assert create_waterways_message(FeatureCollection()) == "Crossed 0 waterways 🌐 https://kreuzungen.world 🗺️"


def test_waterway_names_skip_unnamed():
    fc = FeatureCollection.of([
        line_feature("way/1", vertical(10.0), name="Parthe"),
        line_feature("way/2", vertical(10.1)),
        line_feature("way/3", vertical(10.2), name="Luppe"),
    ])
    assert waterway_names(fc) == ["Parthe", "Luppe"]
