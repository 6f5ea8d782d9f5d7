# polyline.py
# Google encoded-polyline codec.
# Each coordinate is a pair of zig-zag encoded deltas, split into 5-bit
# chunks and offset by 63 so every chunk is a printable ASCII character.

from typing import Iterable, List, Tuple

from .models import Coord


PRECISION = 1e5
_OFFSET = 63
_CHUNK_BITS = 5
_CHUNK_MASK = 0x1F
_CONTINUE_FLAG = 0x20
_MAX_CHAR = _OFFSET + _CHUNK_MASK + _CONTINUE_FLAG   # '~'


class PolylineDecodeError(ValueError):
    """Raised when an encoded polyline string is malformed."""


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------

def _read_value(encoded: str, index: int) -> Tuple[int, int]:
    """Read one signed delta starting at index. Returns (value, next_index)."""
    result = 0
    shift = 0
    while True:
        if index >= len(encoded):
            raise PolylineDecodeError(
                f"Polyline ends inside a value at position {index}."
            )
        code = ord(encoded[index])
        if code < _OFFSET or code > _MAX_CHAR:
            raise PolylineDecodeError(
                f"Invalid character {encoded[index]!r} at position {index}."
            )
        chunk = code - _OFFSET
        index += 1
        result |= (chunk & _CHUNK_MASK) << shift
        shift += _CHUNK_BITS
        if chunk < _CONTINUE_FLAG:
            break

    value = ~(result >> 1) if result & 1 else result >> 1
    return value, index


def decode_polyline(encoded: str) -> List[Coord]:
    """
    Decode an encoded polyline into a list of coordinates.

    Args:
        encoded: Polyline string; an empty string yields an empty list.

    Returns:
        Ordered list of Coord.

    Raises:
        PolylineDecodeError: on bytes outside the alphabet, a truncated value,
            or a latitude with no matching longitude.
    """
    coords: List[Coord] = []
    index = 0
    lat = 0
    lon = 0

    while index < len(encoded):
        d_lat, index = _read_value(encoded, index)
        if index >= len(encoded):
            raise PolylineDecodeError(
                "Polyline has a latitude without a matching longitude."
            )
        d_lon, index = _read_value(encoded, index)
        lat += d_lat
        lon += d_lon
        coords.append(Coord(lat / PRECISION, lon / PRECISION))

    return coords


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------

def _write_value(value: int, out: List[str]) -> None:
    value = ~(value << 1) if value < 0 else value << 1
    while value >= _CONTINUE_FLAG:
        out.append(chr((_CONTINUE_FLAG | (value & _CHUNK_MASK)) + _OFFSET))
        value >>= _CHUNK_BITS
    out.append(chr(value + _OFFSET))


def _to_units(degrees: float) -> int:
    # Round half away from zero, as the reference encoder does.
    scaled = abs(degrees) * PRECISION
    units = int(scaled + 0.5)
    return -units if degrees < 0 else units


def encode_polyline(coords: Iterable[Coord]) -> str:
    """
    Encode coordinates as a polyline string (precision 1e-5 degrees).

    Args:
        coords: Ordered coordinates.

    Returns:
        Encoded polyline; empty for no coordinates.
    """
    out: List[str] = []
    prev_lat = 0
    prev_lon = 0
    for coord in coords:
        lat = _to_units(coord.lat)
        lon = _to_units(coord.lon)
        _write_value(lat - prev_lat, out)
        _write_value(lon - prev_lon, out)
        prev_lat, prev_lon = lat, lon
    return "".join(out)
