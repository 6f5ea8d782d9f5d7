from datetime import timedelta

from navigation.router.location_filter import LocationFilter
from navigation.router.models import Coord, PositionFix
from navigation.router.nav_config import NavConfig

from route_factory import FIXED_NOW

HERE = Coord(1.30, 103.85)


def _fix(age_s=0.0, accuracy_m=5.0):
    return PositionFix(HERE, FIXED_NOW - timedelta(seconds=age_s), accuracy_m=accuracy_m)


def test_fresh_accurate_fix_accepted():
    assert LocationFilter().accept(_fix(age_s=1.0), now=FIXED_NOW)


def test_stale_fix_rejected():
    f = LocationFilter()
    assert f.accept(_fix(age_s=5.0), now=FIXED_NOW)
    assert not f.accept(_fix(age_s=5.1), now=FIXED_NOW)


def test_inaccurate_fix_rejected():
    f = LocationFilter()
    assert f.accept(_fix(accuracy_m=50.0), now=FIXED_NOW)
    assert not f.accept(_fix(accuracy_m=50.5), now=FIXED_NOW)
    assert not f.accept(_fix(accuracy_m=0.0), now=FIXED_NOW)
    assert not f.accept(_fix(accuracy_m=-1.0), now=FIXED_NOW)


def test_limits_come_from_config():
    f = LocationFilter(NavConfig(max_fix_age_s=30.0, max_fix_accuracy_m=100.0))
    assert f.accept(_fix(age_s=20.0, accuracy_m=80.0), now=FIXED_NOW)
