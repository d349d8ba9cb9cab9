from kreuzungen.analysis.geometry_utils import GeometryUtils
from kreuzungen.analysis.intersection import intersecting_features
from kreuzungen.analysis.merger import combine_same_name_features
from kreuzungen.analysis.ordering import order_along_route
from kreuzungen.collectors.osm.parser import OSMResponseParser
from kreuzungen.models import Feature, FeatureCollection

from conftest import line_feature, osm_way, vertical


def test_simple_crossing(route):
    fc = OSMResponseParser.to_geojson({"elements": [osm_way(1, vertical(10.05), waterway="river", name="Thames")]})
    crossed = intersecting_features(combine_same_name_features(fc), route)
    assert [f.name for f in crossed.features] == ["Thames"]
    assert order_along_route(crossed, route) == crossed


def test_result_is_subset_and_really_intersects(route, waterways_response):
    fc = combine_same_name_features(OSMResponseParser.to_geojson(waterways_response))
    crossed = intersecting_features(fc, route)
    assert [f.name for f in crossed.features] == ["Thames", "Avon"]
    route_line = GeometryUtils.to_shape(route)
    for feature in crossed.features:
        assert feature in fc.features
        assert GeometryUtils.to_shape(feature).intersects(route_line)


def test_overlapping_and_touching_count(route):
    fc = FeatureCollection.of([
        line_feature("way/1", [[10.02, 51.0], [10.04, 51.0]], name="Towpath Canal"),
        line_feature("way/2", [[10.1, 51.0], [10.2, 51.1]], name="Source Brook"),
    ])
    assert len(intersecting_features(fc, route)) == 2


def test_order_preserved(route):
    fc = FeatureCollection.of([
        line_feature("way/1", vertical(10.09), name="Last"),
        line_feature("way/2", vertical(10.01), name="First"),
    ])
    assert [f.name for f in intersecting_features(fc, route).features] == ["Last", "First"]


def test_malformed_geometry_excluded(route):
    fc = FeatureCollection.of([
        Feature(id="way/1", geometry=None, properties={"name": "Nowhere"}),
        Feature(id="way/2", geometry={"type": "LineString", "coordinates": [[10.05]]}, properties={"name": "Broken"}),
        line_feature("way/3", vertical(10.05), name="Thames"),
    ])
    assert [f.name for f in intersecting_features(fc, route).features] == ["Thames"]


def test_empty_collection(route):
    assert len(intersecting_features(FeatureCollection(), route)) == 0
