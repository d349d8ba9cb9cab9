from unittest.mock import Mock

import pytest
import requests

from kreuzungen.collectors.strava import StravaClient
from kreuzungen.errors import RouteDecodeError, UpstreamHttpError

from conftest import make_response


@pytest.fixture
def session():
    return Mock(spec=requests.Session)


def test_token_required(config):
    with pytest.raises(ValueError):
        StravaClient("", config.api)


def test_activity_route_from_polyline(config, session):
    session.request.return_value = make_response(200, {
        "name": "Morning Ride",
        "map": {"polyline": "_p~iF~ps|U_ulLnnqC", "summary_polyline": "ignored"},
    })
    route = StravaClient("token", config.api, session=session).get_activity_route(123)

    assert route.coordinates == [[-120.2, 38.5], [-120.95, 40.7]]
    assert route.name == "Morning Ride"
    assert route.properties["stravaUrl"] == "https://www.strava.com/activities/123"
    args, kwargs = session.request.call_args
    assert args == ("GET", "https://www.strava.com/api/v3/activities/123")
    assert kwargs["headers"]["Authorization"] == "Bearer token"


def test_activity_without_polyline(config, session):
    session.request.return_value = make_response(200, {"name": "Treadmill", "map": {"summary_polyline": None}})
    with pytest.raises(RouteDecodeError):
        StravaClient("token", config.api, session=session).get_activity_route(5)


def test_update_description(config, session):
    session.request.return_value = make_response(200, {"id": 7})
    StravaClient("token", config.api, session=session).update_activity_description(7, "Crossed 1 waterway")

    args, kwargs = session.request.call_args
    assert args[0] == "PUT"
    assert kwargs["json"] == {"description": "Crossed 1 waterway"}


def test_unauthorized(config, session):
    session.request.return_value = make_response(401, {"message": "Authorization Error"})
    with pytest.raises(UpstreamHttpError) as excinfo:
        StravaClient("expired", config.api, session=session).get_activity(1)
    assert excinfo.value.status_code == 401
