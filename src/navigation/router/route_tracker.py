# route_tracker.py
# State machine that tracks a traveller's position against an active route.
# Build one NavigationEngine per trip, then call on_position_update() on every
# position fix. Not thread-safe: feed it from a single, ordered stream.

import logging
from datetime import datetime, timedelta
from typing import Callable, List, Optional

from .models import (
    Distance, Duration, EngineState, NavEvent, NavEventKind, NavigationStep,
    PositionFix, Route, Coord,
)
from .geo_utils import coord_distance, min_distance_to_polyline
from .nav_config import NavConfig
from .polyline import PolylineDecodeError, decode_polyline
from .route_progress import ProgressState

logger = logging.getLogger(__name__)

Listener = Callable[[NavEvent], None]


class NavigationEngine:
    """
    Stateful progress tracker for a single navigation session.

    Construction starts navigation at step 0. Events are delivered
    synchronously to every subscribed listener, in emission order, and are
    also returned from the call that produced them.

    Usage:
        engine = NavigationEngine(route, config)
        engine.subscribe(on_event)

        # Inside GPS loop:
        events = engine.on_position_update(fix)

    Args:
        route:  Route to follow. Shared read-only.
        config: Optional NavConfig; defaults to NavConfig().
        clock:  Returns "now" for ETA computation; defaults to datetime.now.
    """

    def __init__(
        self,
        route: Route,
        config: Optional[NavConfig] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.config = config or NavConfig()
        self._clock = clock or datetime.now
        self._progress = ProgressState.start(route, self._clock())
        self._status = EngineState.ACTIVE
        self._listeners: List[Listener] = []
        logger.info(f"Navigation started — {len(route.steps)} steps, {route.distance.formatted}.")

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener. Returns a callable that removes it again."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ------------------------------------------------------------------
    # Read-only properties
    # ------------------------------------------------------------------

    @property
    def status(self) -> EngineState:
        return self._status

    @property
    def is_active(self) -> bool:
        return self._status is EngineState.ACTIVE

    @property
    def route(self) -> Route:
        return self._progress.route

    @property
    def current_step(self) -> Optional[NavigationStep]:
        return self._progress.current_step

    @property
    def is_off_route(self) -> bool:
        return self._progress.is_off_route

    def snapshot(self) -> ProgressState:
        """Copy of the current progress; changing it does not affect the engine."""
        return self._progress.snapshot()

    # ------------------------------------------------------------------
    # Session control
    # ------------------------------------------------------------------

    def cancel(self) -> None:
        """End navigation early. Later updates are ignored."""
        if self._status is EngineState.ACTIVE:
            self._status = EngineState.CANCELLED
            logger.info("Navigation cancelled.")

    def force_advance_step(self) -> List[NavEvent]:
        """
        Skip to the next step without reaching the end of the current one.

        No announcement or off-route evaluation happens here. On the last step
        the index stays put but STEP_COMPLETED is still emitted.

        Returns:
            [STEP_COMPLETED], or [] when not active.
        """
        events: List[NavEvent] = []
        if not self.is_active:
            logger.debug("force_advance_step() ignored: navigation not active.")
            return events

        if self._progress.advance_step():
            if self._progress.is_last_step:
                logger.info("Reached the final step.")
        else:
            logger.debug("force_advance_step() on the final step; index unchanged.")
        self._emit(events, NavEvent(NavEventKind.STEP_COMPLETED))
        return events

    # ------------------------------------------------------------------
    # Core method: call on every position fix
    # ------------------------------------------------------------------

    def on_position_update(self, fix: PositionFix) -> List[NavEvent]:
        """
        Compare a position fix to the active route and update progress.

        Args:
            fix: Position fix, already filtered for staleness and accuracy.

        Returns:
            Events emitted during this update, in order.
        """
        events: List[NavEvent] = []
        if not self.is_active:
            logger.debug(f"Position update ignored: navigation is {self._status.value}.")
            return events

        step = self._progress.current_step
        if step is None:
            logger.warning("Position update with no current step.")
            return events

        position = fix.coord
        distance_to_step_end = coord_distance(position, step.end_location)
        self._progress.distance_to_next_step = Distance.from_meters(distance_to_step_end)
        self._update_remaining(distance_to_step_end)

        # 1. Step completed
        if distance_to_step_end < self.config.step_advance_threshold_m:
            self._complete_step(events)
            if not self.is_active:
                return events

        # 2. Announcement due
        self._check_announcement(int(distance_to_step_end), events)

        # 3. Off-route check against the step this fix was measured on
        self._check_off_route(position, step, events)

        logger.debug(
            f"{int(distance_to_step_end)} m to step end, "
            f"step {self._progress.current_step_index + 1}/{len(self.route.steps)}"
        )
        return events

    # ------------------------------------------------------------------
    # Queries for UI / voice consumers
    # ------------------------------------------------------------------

    def current_instruction(self) -> str:
        step = self._progress.current_step
        if step is None:
            return "Continue to destination"
        return step.plain_instruction

    def distance_text(self) -> str:
        return self._progress.distance_to_next_step.formatted

    def remaining_distance_text(self) -> str:
        return self._progress.remaining_distance.formatted

    def remaining_duration_text(self) -> str:
        return self._progress.remaining_duration.formatted

    def eta_text(self) -> str:
        return self._progress.estimated_arrival_time.strftime("%H:%M")

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _emit(self, events: List[NavEvent], event: NavEvent) -> None:
        events.append(event)
        for listener in list(self._listeners):
            listener(event)

    def _update_remaining(self, distance_to_step_end: float) -> None:
        progress = self._progress
        later_steps = self.route.steps[progress.current_step_index + 1:]
        remaining_m = int(distance_to_step_end) + sum(s.distance.meters for s in later_steps)
        progress.remaining_distance = Distance.from_meters(remaining_m)

        speed_mps = self.config.average_speed_mps
        seconds = int(remaining_m / speed_mps) if speed_mps > 0 else 0
        progress.remaining_duration = Duration.from_seconds(seconds)
        progress.estimated_arrival_time = self._clock() + timedelta(seconds=seconds)

    def _complete_step(self, events: List[NavEvent]) -> None:
        progress = self._progress
        logger.info(f"Step {progress.current_step_index + 1} completed.")

        if progress.is_last_step:
            self._status = EngineState.COMPLETED
            logger.info("Navigation completed.")
            self._emit(events, NavEvent(NavEventKind.NAVIGATION_COMPLETED))
            return

        progress.advance_step()
        self._emit(events, NavEvent(NavEventKind.STEP_COMPLETED))

        new_step = progress.current_step
        logger.info(f"New instruction: {new_step.plain_instruction}")
        self._emit(events, NavEvent(
            NavEventKind.INSTRUCTION_UPDATE,
            text=new_step.plain_instruction,
            distance_m=new_step.distance.meters,
        ))

    def _check_announcement(self, distance_m: int, events: List[NavEvent]) -> None:
        progress = self._progress
        window = self.config.announcement_window_m

        for threshold in self.config.announcement_thresholds_m:
            if not (threshold - window < distance_m <= threshold):
                continue
            last = progress.last_announced_threshold_m
            if last is not None and last <= threshold:
                continue

            step = progress.current_step
            if step is None:
                return
            progress.last_announced_threshold_m = threshold
            logger.info(f"Announcement at {threshold} m: {step.plain_instruction}")
            self._emit(events, NavEvent(
                NavEventKind.INSTRUCTION_UPDATE,
                text=step.plain_instruction,
                distance_m=distance_m,
            ))
            return

    def _check_off_route(self, position: Coord, step: NavigationStep, events: List[NavEvent]) -> None:
        try:
            coords = decode_polyline(step.polyline)
        except PolylineDecodeError as e:
            logger.warning(f"Skipping off-route check, step geometry unreadable: {e}")
            return
        if not coords:
            logger.warning("Skipping off-route check, step has no geometry.")
            return

        min_distance = min_distance_to_polyline(position, coords)
        progress = self._progress
        was_off_route = progress.is_off_route
        progress.is_off_route = min_distance > self.config.off_route_threshold_m

        if progress.is_off_route and not was_off_route:
            logger.warning(f"Off route — {int(min_distance)} m from the route.")
            self._emit(events, NavEvent(NavEventKind.OFF_ROUTE))
        elif was_off_route and not progress.is_off_route:
            # Recovery is silent; there is no "back on route" event.
            logger.info("Back on route.")
