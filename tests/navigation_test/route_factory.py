# Helpers that build small, geometrically exact routes for the tests.
# All steps run due north along longitude 103.85, so distances along the
# route equal differences in latitude.

import math
from datetime import datetime
from typing import List

from navigation.router.geo_utils import EARTH_RADIUS_M
from navigation.router.models import (
    Coord, Distance, Duration, ManeuverKind, NavigationStep, PositionFix, Route, RouteBounds,
)
from navigation.router.polyline import encode_polyline

FIXED_NOW = datetime(2024, 5, 1, 8, 0, 0)
M_PER_DEG = EARTH_RADIUS_M * math.pi / 180.0

START = Coord(1.28, 103.85)
CORNER = Coord(1.29, 103.85)
END = Coord(1.30, 103.85)


def offset(coord: Coord, north_m: float = 0.0, east_m: float = 0.0) -> Coord:
    lat = coord.lat + north_m / M_PER_DEG
    lon = coord.lon + east_m / (M_PER_DEG * math.cos(math.radians(coord.lat)))
    return Coord(lat, lon)


def fix_at(coord: Coord) -> PositionFix:
    return PositionFix(coord=coord, timestamp=FIXED_NOW, accuracy_m=5.0, speed_mps=13.9)


def vertices(a: Coord, b: Coord, spacing_m: float = 20.0) -> List[Coord]:
    length = (b.lat - a.lat) * M_PER_DEG
    parts = max(1, int(math.ceil(abs(length) / spacing_m)))
    return [Coord(a.lat + (b.lat - a.lat) * i / parts, a.lon) for i in range(parts + 1)]


def make_step(a: Coord, b: Coord, instruction: str, meters: int, polyline: str = None) -> NavigationStep:
    return NavigationStep(
        instruction=instruction,
        maneuver=ManeuverKind.STRAIGHT,
        distance=Distance(meters, f"{meters} m"),
        duration=Duration(meters // 10, ""),
        start_location=a,
        end_location=b,
        polyline=encode_polyline(vertices(a, b)) if polyline is None else polyline,
    )


def two_step_route() -> Route:
    steps = (
        make_step(START, CORNER, "Head <b>north</b> on <b>Bridge Rd</b>", 1112),
        make_step(CORNER, END, "Continue onto <b>Harbour St</b>", 1112),
    )
    return Route(
        steps=steps,
        distance=Distance(2224, "2.2 km"),
        duration=Duration(222, "4 mins"),
        polyline=encode_polyline(vertices(START, END)),
        bounds=RouteBounds(northeast=END, southwest=START),
    )


def single_step_route(polyline: str = None) -> Route:
    step = make_step(START, CORNER, "Head north", 1112, polyline=polyline)
    return Route(
        steps=(step,),
        distance=Distance(1112, "1.1 km"),
        duration=Duration(111, "2 mins"),
        polyline=step.polyline,
        bounds=RouteBounds(northeast=CORNER, southwest=START),
    )
