# route_progress.py
# Mutable "where along the route are we" record.
# Owned by a single NavigationEngine; nothing else should write to it.

import logging
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Optional

from .models import Distance, Duration, NavigationStep, Route

logger = logging.getLogger(__name__)


@dataclass
class ProgressState:
    """
    Progress of one navigation session along its Route.

    Build it with ProgressState.start(route); the engine mutates it on every
    position update.
    """
    route: Route
    current_step_index: int
    distance_to_next_step: Distance
    remaining_distance: Distance
    remaining_duration: Duration
    estimated_arrival_time: datetime
    is_off_route: bool = False
    last_announced_threshold_m: Optional[int] = None

    @staticmethod
    def start(route: Route, now: Optional[datetime] = None) -> "ProgressState":
        """Fresh state at step 0 with the route's own totals."""
        now = now or datetime.now()
        return ProgressState(
            route=route,
            current_step_index=0,
            distance_to_next_step=route.steps[0].distance,
            remaining_distance=route.distance,
            remaining_duration=route.duration,
            estimated_arrival_time=now + timedelta(seconds=route.duration.seconds),
        )

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    @property
    def current_step(self) -> Optional[NavigationStep]:
        if 0 <= self.current_step_index < len(self.route.steps):
            return self.route.steps[self.current_step_index]
        return None

    @property
    def next_step(self) -> Optional[NavigationStep]:
        index = self.current_step_index + 1
        if index < len(self.route.steps):
            return self.route.steps[index]
        return None

    @property
    def is_last_step(self) -> bool:
        return self.current_step_index == len(self.route.steps) - 1

    @property
    def progress_percentage(self) -> float:
        total = float(self.route.distance.meters)
        if total <= 0:
            return 0.0
        return (total - self.remaining_distance.meters) / total * 100

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def advance_step(self) -> bool:
        """
        Move to the next step and forget which threshold was last announced.

        Returns:
            False (and changes nothing) when already on the last step.
        """
        if self.is_last_step:
            logger.debug("advance_step() ignored: already on the last step.")
            return False
        self.current_step_index += 1
        self.last_announced_threshold_m = None
        logger.debug(
            f"Moved to step {self.current_step_index + 1} of {len(self.route.steps)}"
        )
        return True

    def snapshot(self) -> "ProgressState":
        """Shallow copy for readers; the Route inside is shared and immutable."""
        return replace(self)
