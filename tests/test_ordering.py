import pytest

from kreuzungen.analysis.ordering import order_along_route, order_records
from kreuzungen.models import Feature, FeatureCollection, Route

from conftest import line_feature, vertical


def test_first_crossing_orders_output(route):
    fc = FeatureCollection.of([
        line_feature("way/1", vertical(10.06), name="Alpha"),
        line_feature("way/2", vertical(10.03), name="Beta"),
    ])
    assert [f.name for f in order_along_route(fc, route).features] == ["Beta", "Alpha"]


def test_multiple_crossings_use_smallest_distance(route):
    # Meanders across the route at 10.08 and again at 10.01
    meander = line_feature("way/1", [[10.08, 50.99], [10.08, 51.01], [10.01, 51.01], [10.01, 50.99]], name="Meander")
    straight = line_feature("way/2", vertical(10.05), name="Straight")
    records = order_records(FeatureCollection.of([straight, meander]), route)
    assert [r.feature.name for r in records] == ["Meander", "Straight"]
    assert records[0].intersection.x == pytest.approx(10.01)


def test_distance_is_measured_along_route():
    # Route runs east then comes back west north of the start
    route = Route.from_coordinates([[10.0, 51.0], [10.1, 51.0], [10.1, 51.02], [10.0, 51.02]])
    fc = FeatureCollection.of([
        line_feature("way/1", [[10.02, 51.01], [10.02, 51.03]], name="Return Leg"),
        line_feature("way/2", [[10.08, 50.99], [10.08, 51.005]], name="Outbound"),
    ])
    records = order_records(fc, route)
    assert [r.feature.name for r in records] == ["Outbound", "Return Leg"]
    # 0.1° east, 0.02° north, 0.08° west
    assert records[1].distance_km > records[0].distance_km + 5


def test_distances_are_non_decreasing(route):
    fc = FeatureCollection.of(
        line_feature(f"way/{i}", vertical(lon), name=f"W{i}")
        for i, lon in enumerate([10.07, 10.01, 10.09, 10.04, 10.02])
    )
    distances = [r.distance_km for r in order_records(fc, route)]
    assert distances == sorted(distances)
    assert len(distances) == 5


def test_ties_keep_input_order(route):
    fc = FeatureCollection.of([
        line_feature("way/1", vertical(10.05), name="Left Arm"),
        line_feature("way/2", vertical(10.05), name="Right Arm"),
    ])
    assert [f.name for f in order_along_route(fc, route).features] == ["Left Arm", "Right Arm"]


def test_features_without_crossing_are_dropped(route):
    fc = FeatureCollection.of([
        line_feature("way/1", [[10.0, 52.0], [10.1, 52.0]], name="Far Away"),
        Feature(id="way/2", geometry=None, properties={"name": "No Geometry"}),
        line_feature("way/3", vertical(10.05), name="Thames"),
    ])
    assert [f.name for f in order_along_route(fc, route).features] == ["Thames"]


def test_empty_collection(route):
    assert len(order_along_route(FeatureCollection(), route)) == 0
