# navigator.py
# Public entry point for the navigation system.
# Owns no business logic; delegates everything to specialist modules.

import logging
import threading
from datetime import datetime
from typing import Callable, List, Optional, Tuple

from .models import EngineState, NavEvent, PositionFix, Route
from .nav_config import NavConfig
from .location_filter import LocationFilter
from .route_progress import ProgressState
from .route_tracker import Listener, NavigationEngine

logger = logging.getLogger(__name__)


class NavigationSystem:
    """
    High-level navigation facade.

    Typical lifecycle:
        nav = NavigationSystem(config)
        nav.add_listener(voice.on_event)
        nav.start_navigation(route)

        # GPS loop:
        events = nav.update(fix)

    Fixes may arrive from several threads; they are filtered and handed to
    the engine one at a time.

    Args:
        config: Optional NavConfig; defaults to NavConfig().
        clock:  Returns "now" for fix staleness and ETA; defaults to datetime.now.
    """

    def __init__(
        self,
        config: Optional[NavConfig] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.config = config or NavConfig()
        self._clock = clock or datetime.now
        self._filter = LocationFilter(self.config)
        self._engine: Optional[NavigationEngine] = None
        self._listeners: List[Listener] = []
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Navigation control
    # ------------------------------------------------------------------

    def add_listener(self, listener: Listener) -> None:
        """Listener attached to every engine this system starts."""
        with self._lock:
            self._listeners.append(listener)
            if self._engine is not None:
                self._engine.subscribe(listener)

    def start_navigation(self, route: Route) -> Tuple[bool, str]:
        """
        Begin tracking a route, replacing any session in progress.

        Returns:
            (success, message)
        """
        with self._lock:
            if self._engine is not None and self._engine.is_active:
                logger.info("Replacing the active navigation session.")
                self._engine.cancel()

            self._engine = NavigationEngine(route, self.config, clock=self._clock)
            for listener in self._listeners:
                self._engine.subscribe(listener)

        first_instruction = route.steps[0].plain_instruction
        logger.info(f"Route ready — {len(route.steps)} steps. First: {first_instruction}")
        return True, f"Route ready. {len(route.steps)} steps."

    def stop_navigation(self) -> None:
        """Forcibly end the current navigation session."""
        with self._lock:
            if self._engine is not None:
                self._engine.cancel()
        logger.info("Navigation stopped by user.")

    def force_next_step(self) -> List[NavEvent]:
        """Manual override: move on to the next step."""
        with self._lock:
            if self._engine is None:
                return []
            return self._engine.force_advance_step()

    # ------------------------------------------------------------------
    # GPS update: call this on every position fix
    # ------------------------------------------------------------------

    def update(self, fix: PositionFix) -> List[NavEvent]:
        """
        Process a new position fix.

        Stale or imprecise fixes are dropped before they reach the engine.

        Returns:
            Events raised by this fix (empty when dropped or not navigating).
        """
        if not self._filter.accept(fix, now=self._clock()):
            return []
        with self._lock:
            if self._engine is None:
                return []
            return self._engine.on_position_update(fix)

    # ------------------------------------------------------------------
    # Convenience read-only properties
    # ------------------------------------------------------------------

    @property
    def status(self) -> Optional[EngineState]:
        return self._engine.status if self._engine else None

    @property
    def is_active(self) -> bool:
        return self._engine is not None and self._engine.is_active

    @property
    def progress(self) -> Optional[ProgressState]:
        with self._lock:
            return self._engine.snapshot() if self._engine else None

    @property
    def instruction(self) -> str:
        return self._engine.current_instruction() if self._engine else ""

    @property
    def distance_text(self) -> str:
        return self._engine.distance_text() if self._engine else ""

    @property
    def remaining_distance_text(self) -> str:
        return self._engine.remaining_distance_text() if self._engine else ""

    @property
    def remaining_duration_text(self) -> str:
        return self._engine.remaining_duration_text() if self._engine else ""

    @property
    def eta_text(self) -> str:
        return self._engine.eta_text() if self._engine else ""
