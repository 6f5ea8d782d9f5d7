import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[2]
SRC_ROOT = PROJECT_ROOT / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from navigation.router.nav_config import NavConfig  # noqa: E402
from route_factory import FIXED_NOW  # noqa: E402


@pytest.fixture
def clock():
    return lambda: FIXED_NOW


@pytest.fixture
def config():
    return NavConfig()
