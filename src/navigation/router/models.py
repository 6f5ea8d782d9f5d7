# models.py
# Shared data structures and enums used across all modules.

import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple


# ---------------------------------------------------------------------------
# Coordinate
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Coord:
    """Immutable geographic coordinate."""
    lat: float
    lon: float

    @staticmethod
    def from_dict(d: dict) -> "Coord":
        return Coord(float(d["lat"]), float(d["lng"]))


@dataclass(frozen=True)
class PositionFix:
    """One reading from the location source."""
    coord: Coord
    timestamp: datetime
    accuracy_m: float             # horizontal accuracy radius, metres
    speed_mps: float = 0.0


# ---------------------------------------------------------------------------
# Display formatting
# ---------------------------------------------------------------------------

def format_distance(meters: float) -> str:
    """'950 m' below one kilometre, '5.2 km' from there on."""
    if meters < 1000:
        return f"{int(meters)} m"
    return f"{meters / 1000.0:.1f} km"


def format_duration(seconds: int) -> str:
    """'1h 30m' from one hour on, '5 min' below that."""
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes} min"


# ---------------------------------------------------------------------------
# Distance / Duration
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Distance:
    """Whole metres plus the text supplied with them (e.g. by the directions API)."""
    meters: int
    text: str = ""

    def __post_init__(self) -> None:
        if self.meters < 0:
            raise ValueError(f"Distance cannot be negative: {self.meters}")

    @staticmethod
    def from_meters(meters: float) -> "Distance":
        return Distance(int(meters), format_distance(meters))

    @property
    def formatted(self) -> str:
        return format_distance(self.meters)


@dataclass(frozen=True)
class Duration:
    """Whole seconds plus the text supplied with them."""
    seconds: int
    text: str = ""

    def __post_init__(self) -> None:
        if self.seconds < 0:
            raise ValueError(f"Duration cannot be negative: {self.seconds}")

    @staticmethod
    def from_seconds(seconds: int) -> "Duration":
        return Duration(int(seconds), format_duration(int(seconds)))

    @property
    def formatted(self) -> str:
        return format_duration(self.seconds)


# ---------------------------------------------------------------------------
# Maneuver
# ---------------------------------------------------------------------------

class ManeuverKind(Enum):
    TURN_LEFT          = "turn-left"
    TURN_RIGHT         = "turn-right"
    TURN_SLIGHT_LEFT   = "turn-slight-left"
    TURN_SLIGHT_RIGHT  = "turn-slight-right"
    TURN_SHARP_LEFT    = "turn-sharp-left"
    TURN_SHARP_RIGHT   = "turn-sharp-right"
    UTURN_LEFT         = "uturn-left"
    UTURN_RIGHT        = "uturn-right"
    MERGE              = "merge"
    STRAIGHT           = "straight"
    RAMP_LEFT          = "ramp-left"
    RAMP_RIGHT         = "ramp-right"
    FORK               = "fork"
    ROUNDABOUT_LEFT    = "roundabout-left"
    ROUNDABOUT_RIGHT   = "roundabout-right"
    FERRY              = "ferry"
    FERRY_TRAIN        = "ferry-train"
    KEEP               = "keep"
    UNKNOWN            = ""

    @staticmethod
    def parse(value: Optional[str]) -> "ManeuverKind":
        """Map a directions API maneuver string; anything unrecognised is UNKNOWN."""
        try:
            return ManeuverKind(value or "")
        except ValueError:
            return ManeuverKind.UNKNOWN

    @property
    def icon_name(self) -> str:
        return _ICON_NAMES.get(self, "arrow.up")


_ICON_NAMES = {
    ManeuverKind.TURN_LEFT:         "arrow.turn.up.left",
    ManeuverKind.TURN_SLIGHT_LEFT:  "arrow.turn.up.left",
    ManeuverKind.TURN_RIGHT:        "arrow.turn.up.right",
    ManeuverKind.TURN_SLIGHT_RIGHT: "arrow.turn.up.right",
    ManeuverKind.TURN_SHARP_LEFT:   "arrow.uturn.left",
    ManeuverKind.TURN_SHARP_RIGHT:  "arrow.uturn.right",
    ManeuverKind.UTURN_LEFT:        "arrow.uturn.backward",
    ManeuverKind.UTURN_RIGHT:       "arrow.uturn.backward",
    ManeuverKind.MERGE:             "arrow.triangle.merge",
    ManeuverKind.RAMP_LEFT:         "arrow.turn.up.left",
    ManeuverKind.RAMP_RIGHT:        "arrow.turn.up.right",
    ManeuverKind.FORK:              "arrow.triangle.branch",
    ManeuverKind.ROUNDABOUT_LEFT:   "arrow.triangle.turn.up.right.circle",
    ManeuverKind.ROUNDABOUT_RIGHT:  "arrow.triangle.turn.up.right.circle",
    ManeuverKind.FERRY:             "ferry",
    ManeuverKind.FERRY_TRAIN:       "ferry",
}


# ---------------------------------------------------------------------------
# Route step
# ---------------------------------------------------------------------------

_HTML_TAG = re.compile(r"<[^>]+>")


def strip_html(text: str) -> str:
    return _HTML_TAG.sub("", text)


@dataclass(frozen=True)
class NavigationStep:
    """One maneuver-bounded leg of a route."""
    instruction: str             # as delivered, may contain HTML markup
    maneuver: ManeuverKind
    distance: Distance
    duration: Duration
    start_location: Coord
    end_location: Coord
    polyline: str                # encoded geometry of this step

    @property
    def plain_instruction(self) -> str:
        return strip_html(self.instruction)


# ---------------------------------------------------------------------------
# Route
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RouteBounds:
    northeast: Coord
    southwest: Coord


@dataclass(frozen=True)
class Route:
    """A complete trip from origin to destination. Never mutated after creation."""
    steps: Tuple[NavigationStep, ...]
    distance: Distance
    duration: Duration
    polyline: str
    bounds: RouteBounds
    warnings: Tuple[str, ...] = field(default_factory=tuple)
    summary: str = ""

    def __post_init__(self) -> None:
        if not self.steps:
            raise ValueError("A route needs at least one step.")
        # Accept lists from callers but keep the stored value immutable.
        object.__setattr__(self, "steps", tuple(self.steps))
        object.__setattr__(self, "warnings", tuple(self.warnings))

    @property
    def destination(self) -> Coord:
        return self.steps[-1].end_location


# ---------------------------------------------------------------------------
# Engine status and events
# ---------------------------------------------------------------------------

class EngineState(Enum):
    ACTIVE     = "active"
    COMPLETED  = "completed"
    CANCELLED  = "cancelled"


class NavEventKind(Enum):
    INSTRUCTION_UPDATE    = "instruction_update"
    STEP_COMPLETED        = "step_completed"
    NAVIGATION_COMPLETED  = "navigation_completed"
    OFF_ROUTE             = "off_route"


@dataclass(frozen=True)
class NavEvent:
    """Emitted by NavigationEngine; text/distance_m are set for INSTRUCTION_UPDATE only."""
    kind: NavEventKind
    text: Optional[str] = None
    distance_m: Optional[int] = None
