import pytest

from navigation.router.models import Coord
from navigation.router.polyline import PolylineDecodeError, decode_polyline, encode_polyline

# Reference example from the polyline algorithm documentation.
REFERENCE_POINTS = [Coord(38.5, -120.2), Coord(40.7, -120.95), Coord(43.252, -126.453)]
REFERENCE_ENCODED = "_p~iF~ps|U_ulLnnqC_mqNvxq`@"


def _close(a, b):
    assert len(a) == len(b)
    for p, q in zip(a, b):
        assert p.lat == pytest.approx(q.lat, abs=1e-5)
        assert p.lon == pytest.approx(q.lon, abs=1e-5)


def test_decode_reference_string():
    _close(decode_polyline(REFERENCE_ENCODED), REFERENCE_POINTS)


def test_encode_reference_points():
    assert encode_polyline(REFERENCE_POINTS) == REFERENCE_ENCODED


def test_empty_input_and_output():
    assert decode_polyline("") == []
    assert encode_polyline([]) == ""


@pytest.mark.parametrize("coords", [
    [Coord(1.2966, 103.8520)],
    [Coord(-33.868820, 151.209295), Coord(-33.87, 151.21), Coord(-33.8701, 151.2105)],
    [Coord(0.0, 0.0), Coord(0.0, -179.99999), Coord(89.99999, 179.99999), Coord(-89.99999, 0.00001)],
    [Coord(51.507351, -0.127758), Coord(51.507351, -0.127758)],
])
def test_round_trip_within_precision(coords):
    _close(decode_polyline(encode_polyline(coords)), coords)


@pytest.mark.parametrize("encoded", [
    "_p~iF",          # latitude with no longitude
    "_p~iF~ps|",      # value cut off mid-way
    "_p~iF~ps|U ",    # space is below the alphabet
    "_p~iF\x7fps|U",  # DEL is above the alphabet
])
def test_malformed_input_raises(encoded):
    with pytest.raises(PolylineDecodeError):
        decode_polyline(encoded)


def test_decode_error_is_a_value_error():
    assert issubclass(PolylineDecodeError, ValueError)
