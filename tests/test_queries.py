from kreuzungen.collectors.osm import queries


SMALL_BBOX = (10.0, 51.0, 10.1, 51.1)
HUGE_BBOX = (5.0, 45.0, 15.0, 55.0)


def test_small_bbox_fetches_ways_and_relations():
    query = queries.waterways_in_bbox_query(SMALL_BBOX)
    assert query == (
        '[out:json];(rel["waterway"](51.0,10.0,51.1,10.1);'
        'way["waterway"](51.0,10.0,51.1,10.1);)->._;out geom;'
    )


def test_huge_bbox_fetches_relations_only():
    query = queries.waterways_in_bbox_query(HUGE_BBOX)
    assert query == '[out:json];rel["waterway"](45.0,5.0,55.0,15.0);out geom;'


def test_size_limit_override():
    query = queries.waterways_in_bbox_query(SMALL_BBOX, size_limit_m2=1.0)
    assert "way[" not in query


def test_degenerate_bbox_counts_as_small():
    # A due-east route has a zero-height bbox
    query = queries.waterways_in_bbox_query((10.0, 51.0, 10.1, 51.0))
    assert 'way["waterway"]' in query


def test_area_id_offset():
    assert queries.area_id(62649) == 3600062649
    assert queries.area_id("62649") == 3600062649
    assert queries.area_id(1, offset=10) == 11


def test_area_queries():
    assert queries.waterways_in_area_query(62649) == (
        '[out:json];(rel(area:3600062649)["waterway"];'
        'way(area:3600062649)["waterway"];)->._;out geom;'
    )
    assert queries.waterway_relations_in_area_query(62649) == (
        '[out:json];rel(area:3600062649)["waterway"];out geom;'
    )


def test_poi_queries():
    assert queries.pois_in_relation_query(62649, 'amenity~"^(cafe)$"') == (
        '[out:json];node(area:3600062649)[amenity~"^(cafe)$"];out geom;'
    )
    assert queries.pois_in_circle_query(51.34, 12.37, 500, 'leisure="park"') == (
        '[out:json];node(around:500,51.34,12.37)[leisure="park"];out geom;'
    )
    assert queries.node_query("42") == "[out:json];node(42);out geom;"


def test_places_query():
    assert queries.places_in_bbox_query(SMALL_BBOX) == (
        '[out:json];(relation[place="city"](51.0,10.0,51.1,10.1);'
        'relation[place="town"](51.0,10.0,51.1,10.1);'
        'relation[place="village"](51.0,10.0,51.1,10.1););out tags;'
    )
    assert queries.places_in_bbox_query(SMALL_BBOX, ["hamlet"]) == (
        '[out:json];(relation[place="hamlet"](51.0,10.0,51.1,10.1););out tags;'
    )
