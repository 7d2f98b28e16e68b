"""
Unit tests for temporal utility functions.
"""

import pytest
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from utils.temporal_utils import (
    add_days,
    hours_between,
    localize,
    midnight,
    month_day_params,
    resolve_timezone,
)

CHICAGO = ZoneInfo("America/Chicago")


class TestResolveTimezone:

    def test_resolves_iana_name(self):
        assert resolve_timezone("America/Chicago") == CHICAGO

    def test_passes_tzinfo_through(self):
        assert resolve_timezone(timezone.utc) is timezone.utc

    @pytest.mark.parametrize("value", ["Mars/Olympus_Mons", "", "  ", None, 5, "../etc/passwd"])
    def test_rejects_invalid(self, value):
        with pytest.raises(ValueError):
            resolve_timezone(value)


class TestLocalize:

    def test_naive_is_wall_clock(self):
        assert localize(datetime(2023, 1, 1, 9, 30), CHICAGO) == datetime(2023, 1, 1, 9, 30, tzinfo=CHICAGO)

    def test_aware_is_converted(self):
        result = localize(datetime(2023, 1, 1, 12, 0, tzinfo=timezone.utc), CHICAGO)

        assert result.tzinfo is CHICAGO
        assert result.hour == 6

    def test_midnight(self):
        assert midnight(datetime(2023, 7, 4, 18, 45), CHICAGO) == datetime(2023, 7, 4, tzinfo=CHICAGO)


class TestDateArithmetic:

    def test_add_days_keeps_wall_clock_across_dst(self):
        result = add_days(datetime(2023, 3, 10, tzinfo=CHICAGO), 5)

        assert result == datetime(2023, 3, 15, tzinfo=CHICAGO)
        assert result.hour == 0

    def test_hours_between_is_absolute(self):
        a = datetime(2023, 1, 1, tzinfo=CHICAGO)
        b = datetime(2023, 1, 3, 12, 0, tzinfo=CHICAGO)

        assert hours_between(a, b) == pytest.approx(60.0)
        assert hours_between(b, a) == pytest.approx(60.0)


class TestMonthDayParams:

    def test_regular_day(self):
        assert month_day_params(15) == ((15,), None)
        assert month_day_params(28) == ((28,), None)

    def test_late_days_clamp(self):
        assert month_day_params(29) == ((28, 29), -1)
        assert month_day_params(31) == ((28, 29, 30, 31), -1)

    @pytest.mark.parametrize("day", [0, 32, -1])
    def test_invalid_day(self, day):
        with pytest.raises(ValueError):
            month_day_params(day)
