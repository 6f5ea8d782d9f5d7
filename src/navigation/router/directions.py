# directions.py
# Turns a Google Directions JSON document into a Route.
# The HTTP request itself belongs to the caller; this module only builds the
# query parameters and parses the response.

import json
import logging
from enum import Enum
from typing import Any, Dict

from .models import Coord, Distance, Duration, ManeuverKind, NavigationStep, Route, RouteBounds

logger = logging.getLogger(__name__)


class TravelMode(Enum):
    DRIVING   = "driving"
    WALKING   = "walking"
    BICYCLING = "bicycling"
    TRANSIT   = "transit"


class DirectionsError(Exception):
    """Raised when a directions response cannot be turned into a Route."""


def build_directions_params(
    origin: Coord,
    destination: Coord,
    api_key: str,
    mode: TravelMode = TravelMode.DRIVING,
) -> Dict[str, str]:
    """Query parameters for a single-route, metric directions request."""
    return {
        "origin": f"{origin.lat},{origin.lon}",
        "destination": f"{destination.lat},{destination.lon}",
        "mode": mode.value,
        "key": api_key,
        "alternatives": "false",
        "units": "metric",
    }


# ---------------------------------------------------------------------------
# Response parsing
# ---------------------------------------------------------------------------

def _parse_step(d: Dict[str, Any]) -> NavigationStep:
    return NavigationStep(
        instruction=d["html_instructions"],
        maneuver=ManeuverKind.parse(d.get("maneuver")),
        distance=Distance(d["distance"]["value"], d["distance"]["text"]),
        duration=Duration(d["duration"]["value"], d["duration"]["text"]),
        start_location=Coord.from_dict(d["start_location"]),
        end_location=Coord.from_dict(d["end_location"]),
        polyline=d["polyline"]["points"],
    )


def parse_directions_response(payload: Dict[str, Any]) -> Route:
    """
    Build a Route from the first route and first leg of a directions response.

    Args:
        payload: Decoded JSON response.

    Returns:
        Route.

    Raises:
        DirectionsError: API status other than "OK", no route, no leg,
            no steps, or missing fields.
    """
    if not isinstance(payload, dict):
        raise DirectionsError(f"Invalid route data received: expected an object, got {type(payload).__name__}")

    status = payload.get("status")
    if status != "OK":
        raise DirectionsError(f"Directions API error: {status}")

    try:
        routes = payload.get("routes") or []
        if not routes:
            raise DirectionsError("No route found between the locations")
        route_data = routes[0]

        legs = route_data.get("legs") or []
        if not legs:
            raise DirectionsError("Invalid route data received")
        leg = legs[0]

        steps = [_parse_step(s) for s in leg.get("steps", [])]
        if not steps:
            raise DirectionsError("Route leg has no steps")
        route = Route(
            steps=tuple(steps),
            distance=Distance(leg["distance"]["value"], leg["distance"]["text"]),
            duration=Duration(leg["duration"]["value"], leg["duration"]["text"]),
            polyline=route_data["overview_polyline"]["points"],
            bounds=RouteBounds(
                northeast=Coord.from_dict(route_data["bounds"]["northeast"]),
                southwest=Coord.from_dict(route_data["bounds"]["southwest"]),
            ),
            warnings=tuple(route_data.get("warnings", [])),
            summary=route_data.get("summary", ""),
        )
    except (AttributeError, IndexError, KeyError, TypeError, ValueError) as e:
        raise DirectionsError(f"Invalid route data received: {e}") from e

    logger.info(f"Route parsed — {route.distance.text}, {route.duration.text}, {len(route.steps)} steps.")
    return route


def load_route_file(filepath: str) -> Route:
    """
    Read a saved directions response from disk and parse it.

    Raises:
        DirectionsError: if the file is unreadable or not a valid response.
    """
    try:
        with open(filepath, "r", encoding="utf-8") as f:
            payload = json.load(f)
    except (IOError, ValueError) as e:
        raise DirectionsError(f"Failed to load route from {filepath}: {e}") from e
    return parse_directions_response(payload)
