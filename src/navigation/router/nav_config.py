# nav_config.py
# All tuneable constants in one place.
# Pass a NavConfig instance to every module that needs settings.

from dataclasses import dataclass, field
from typing import Tuple


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

ANNOUNCEMENT_THRESHOLDS_M: Tuple[int, ...] = (500, 200, 100, 50)   # descending

AVERAGE_SPEED_KMH: float = 50.0  # km/h, used for remaining-time estimates


# ---------------------------------------------------------------------------
# Main config
# ---------------------------------------------------------------------------

@dataclass
class NavConfig:
    # Progress tracking
    step_advance_threshold_m: float = 50.0   # distance to a step's end that completes it
    off_route_threshold_m: float = 50.0      # distance from the step geometry → off-route
    average_speed_kmh: float = AVERAGE_SPEED_KMH

    # Announcements
    announcement_thresholds_m: Tuple[int, ...] = field(
        default_factory=lambda: ANNOUNCEMENT_THRESHOLDS_M
    )
    announcement_window_m: int = 20          # threshold T fires for T-window < d <= T

    # Location fixes
    max_fix_age_s: float = 5.0
    max_fix_accuracy_m: float = 50.0

    # Voice
    speech_rate: int = 150
    voice_enabled: bool = True

    @property
    def average_speed_mps(self) -> float:
        return self.average_speed_kmh / 3.6
