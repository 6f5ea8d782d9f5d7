# location_filter.py
# Drops position fixes that are too old or too imprecise to navigate on.

import logging
from datetime import datetime
from typing import Optional

from .models import PositionFix
from .nav_config import NavConfig

logger = logging.getLogger(__name__)


class LocationFilter:
    """
    Gatekeeper between the location source and the navigation engine.

    Args:
        config: NavConfig with max_fix_age_s and max_fix_accuracy_m.
    """

    def __init__(self, config: Optional[NavConfig] = None) -> None:
        self.config = config or NavConfig()

    def accept(self, fix: PositionFix, now: Optional[datetime] = None) -> bool:
        """True when fix is fresh enough and its accuracy radius is usable."""
        now = now or datetime.now()
        age_s = (now - fix.timestamp).total_seconds()
        if age_s > self.config.max_fix_age_s:
            logger.debug(f"Fix is stale ({age_s:.1f} s old), ignoring.")
            return False

        if fix.accuracy_m <= 0 or fix.accuracy_m > self.config.max_fix_accuracy_m:
            logger.debug(f"Fix accuracy too low: {fix.accuracy_m} m")
            return False

        return True
