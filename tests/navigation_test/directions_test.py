import copy
import json

import pytest

from navigation.router.directions import (
    DirectionsError, TravelMode, build_directions_params, load_route_file, parse_directions_response,
)
from navigation.router.models import Coord, ManeuverKind

SAMPLE_RESPONSE = {
    "status": "OK",
    "routes": [{
        "summary": "Orchard Rd",
        "warnings": [],
        "bounds": {
            "northeast": {"lat": 1.3052, "lng": 103.8320},
            "southwest": {"lat": 1.3001, "lng": 103.8301},
        },
        "overview_polyline": {"points": "_p~iF~ps|U_ulLnnqC"},
        "legs": [{
            "distance": {"text": "0.8 km", "value": 812},
            "duration": {"text": "2 mins", "value": 130},
            "steps": [
                {
                    "html_instructions": "Head <b>north</b> on <b>Scotts Rd</b>",
                    "distance": {"text": "0.5 km", "value": 512},
                    "duration": {"text": "1 min", "value": 80},
                    "start_location": {"lat": 1.3001, "lng": 103.8301},
                    "end_location": {"lat": 1.3047, "lng": 103.8301},
                    "polyline": {"points": "_p~iF~ps|U"},
                },
                {
                    "html_instructions": "Turn <b>right</b> onto <b>Orchard Rd</b>",
                    "maneuver": "turn-right",
                    "distance": {"text": "0.3 km", "value": 300},
                    "duration": {"text": "1 min", "value": 50},
                    "start_location": {"lat": 1.3047, "lng": 103.8301},
                    "end_location": {"lat": 1.3052, "lng": 103.8320},
                    "polyline": {"points": "_ulLnnqC"},
                },
            ],
        }],
    }],
}


def test_parse_sample_response():
    route = parse_directions_response(SAMPLE_RESPONSE)

    assert route.summary == "Orchard Rd"
    assert route.distance.meters == 812
    assert route.duration.text == "2 mins"
    assert len(route.steps) == 2
    assert route.steps[0].maneuver is ManeuverKind.UNKNOWN
    assert route.steps[1].maneuver is ManeuverKind.TURN_RIGHT
    assert route.steps[1].plain_instruction == "Turn right onto Orchard Rd"
    assert route.steps[1].end_location == Coord(1.3052, 103.8320)
    assert route.bounds.northeast == Coord(1.3052, 103.8320)
    assert route.polyline == "_p~iF~ps|U_ulLnnqC"


@pytest.mark.parametrize("status", ["ZERO_RESULTS", "REQUEST_DENIED", None])
def test_non_ok_status_raises(status):
    payload = dict(SAMPLE_RESPONSE, status=status)
    with pytest.raises(DirectionsError, match="Directions API error"):
        parse_directions_response(payload)


def test_no_routes_raises():
    with pytest.raises(DirectionsError, match="No route found"):
        parse_directions_response({"status": "OK", "routes": []})


def test_missing_fields_raise():
    payload = copy.deepcopy(SAMPLE_RESPONSE)
    del payload["routes"][0]["legs"][0]["steps"][0]["end_location"]
    with pytest.raises(DirectionsError):
        parse_directions_response(payload)


def test_leg_without_steps_raises():
    payload = copy.deepcopy(SAMPLE_RESPONSE)
    payload["routes"][0]["legs"][0]["steps"] = []
    with pytest.raises(DirectionsError):
        parse_directions_response(payload)


def test_build_params():
    params = build_directions_params(Coord(1.30, 103.83), Coord(1.31, 103.84), "secret", TravelMode.WALKING)
    assert params == {
        "origin": "1.3,103.83",
        "destination": "1.31,103.84",
        "mode": "walking",
        "key": "secret",
        "alternatives": "false",
        "units": "metric",
    }


def test_load_route_file(tmp_path):
    path = tmp_path / "route.json"
    path.write_text(json.dumps(SAMPLE_RESPONSE), encoding="utf-8")

    route = load_route_file(str(path))
    assert len(route.steps) == 2


def test_load_route_file_errors(tmp_path):
    with pytest.raises(DirectionsError):
        load_route_file(str(tmp_path / "missing.json"))

    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    with pytest.raises(DirectionsError):
        load_route_file(str(broken))

    not_an_object = tmp_path / "list.json"
    not_an_object.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(DirectionsError, match="expected an object"):
        load_route_file(str(not_an_object))


@pytest.mark.parametrize("path, bad_value", [
    (("routes",), ["not a route"]),
    (("routes", 0, "legs"), ["not a leg"]),
    (("routes", 0, "legs", 0, "steps"), "abc"),
])
def test_malformed_nesting_raises(path, bad_value):
    payload = copy.deepcopy(SAMPLE_RESPONSE)
    target = payload
    for key in path[:-1]:
        target = target[key]
    target[path[-1]] = bad_value
    with pytest.raises(DirectionsError):
        parse_directions_response(payload)
