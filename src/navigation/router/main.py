# main.py
# Entry point: simulates a GPS loop feeding position fixes into NavigationSystem.
# In production, replace the simulated fixes with your real location source
# and the built-in route with a parsed directions response (--route file.json).

import argparse
import logging
import time
from datetime import datetime
from typing import List, Optional

from .directions import load_route_file
from .models import (
    Coord, Distance, Duration, ManeuverKind, NavEventKind, NavigationStep,
    PositionFix, Route, RouteBounds,
)
from .nav_config import NavConfig
from .navigator import NavigationSystem
from .polyline import decode_polyline, encode_polyline

# ------------------------------------------------------------------
# Logging setup: configure once here, all modules inherit
# ------------------------------------------------------------------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%H:%M:%S",
)

# ------------------------------------------------------------------
# Demo route (Singapore, heading north then east)
# ------------------------------------------------------------------
_START  = Coord(1.2800, 103.8500)
_CORNER = Coord(1.2900, 103.8500)
_END    = Coord(1.2900, 103.8560)


def _line(a: Coord, b: Coord, parts: int = 20) -> List[Coord]:
    return [
        Coord(a.lat + (b.lat - a.lat) * i / parts, a.lon + (b.lon - a.lon) * i / parts)
        for i in range(parts + 1)
    ]


def demo_route() -> Route:
    leg1 = _line(_START, _CORNER)
    leg2 = _line(_CORNER, _END)
    steps = (
        NavigationStep(
            instruction="Head <b>north</b> on <b>Bridge Rd</b>",
            maneuver=ManeuverKind.STRAIGHT,
            distance=Distance(1112, "1.1 km"),
            duration=Duration(120, "2 mins"),
            start_location=_START,
            end_location=_CORNER,
            polyline=encode_polyline(leg1),
        ),
        NavigationStep(
            instruction="Turn <b>right</b> onto <b>Harbour St</b>",
            maneuver=ManeuverKind.TURN_RIGHT,
            distance=Distance(667, "0.7 km"),
            duration=Duration(80, "1 min"),
            start_location=_CORNER,
            end_location=_END,
            polyline=encode_polyline(leg2),
        ),
    )
    return Route(
        steps=steps,
        distance=Distance(1779, "1.8 km"),
        duration=Duration(200, "3 mins"),
        polyline=encode_polyline(leg1 + leg2[1:]),
        bounds=RouteBounds(northeast=_END, southwest=_START),
        summary="Bridge Rd",
    )


def simulated_fixes(route: Route) -> List[Coord]:
    """Every vertex of every step, in travel order."""
    coords: List[Coord] = []
    for step in route.steps:
        coords.extend(decode_polyline(step.polyline))
    return coords


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Simulated turn-by-turn navigation session")
    parser.add_argument("--route", default=None,
                        help="Saved directions JSON response (default: built-in demo route)")
    parser.add_argument("--interval", type=float, default=0.05,
                        help="Seconds between simulated fixes")
    parser.add_argument("--voice", action="store_true",
                        help="Speak instructions through the system TTS engine")
    args = parser.parse_args(argv)

    config = NavConfig(voice_enabled=args.voice)
    route = load_route_file(args.route) if args.route else demo_route()

    # 1. Boot system
    nav = NavigationSystem(config=config)
    voice = None
    if args.voice:
        from tts_stt.tts import VoiceGuidance
        voice = VoiceGuidance(config)
        nav.add_listener(voice.on_event)

    # 2. Start tracking
    success, msg = nav.start_navigation(route)
    print(f"[Nav] {msg}")
    if not success:
        return
    print(f"[Nav] {nav.instruction}")

    print("\n--- GPS Loop Active ---")

    # 3. GPS loop, replace with real GPS feed in production
    for position in simulated_fixes(route):
        fix = PositionFix(coord=position, timestamp=datetime.now(), accuracy_m=5.0, speed_mps=13.9)
        events = nav.update(fix)

        print(
            f"  GPS ({position.lat:.5f}, {position.lon:.5f}) → {nav.distance_text} to next, "
            f"{nav.remaining_distance_text} left, ETA {nav.eta_text}"
        )
        for event in events:
            if event.kind is NavEventKind.INSTRUCTION_UPDATE:
                print(f"  >  {event.text} ({event.distance_m} m)")
            elif event.kind is NavEventKind.OFF_ROUTE:
                print("  ⚠  Off-route detected.")
            elif event.kind is NavEventKind.NAVIGATION_COMPLETED:
                print("  ✓  Destination reached. Navigation ended.")

        if not nav.is_active:
            break

        # Simulate GPS poll interval (remove in real use)
        time.sleep(args.interval)

    if voice is not None:
        voice.shutdown()
    print("\n--- Session complete ---")


if __name__ == "__main__":
    main()
