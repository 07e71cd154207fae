"""Tests for clinicgrid.scheduling.layout module."""

from datetime import date, datetime, time, timedelta

import pytest

from clinicgrid.models import SchedulerSettings
from clinicgrid.scheduling.layout import LayoutMapper, assign_lanes

DAY = date(2025, 1, 15)


def at(hour: int, minute: int = 0, day: date = DAY) -> datetime:
    return datetime.combine(day, time(hour, minute))


@pytest.fixture
def mapper() -> LayoutMapper:
    """08:00-20:00, 30-minute slots, 40px per slot."""
    return LayoutMapper(8 * 60, 20 * 60, 30, 40)


class TestConstruction:
    """Tests for LayoutMapper construction."""

    def test_from_settings(self, settings):
        mapper = LayoutMapper.from_settings(settings)
        assert mapper.slot_start_minutes == 480
        assert mapper.slot_end_minutes == 1200
        assert mapper.column_height == 960

    @pytest.mark.parametrize(
        "args",
        [(8 * 60 + 15, 20 * 60, 30, 40), (10 * 60, 10 * 60, 30, 40), (480, 1200, 30, 0)],
    )
    def test_invalid_window_raises(self, args):
        with pytest.raises(ValueError):
            LayoutMapper(*args)

    def test_settings_reject_bad_slot(self):
        with pytest.raises(ValueError):
            SchedulerSettings(start_hour=8, end_hour=9, slot_minutes=25)


class TestPlace:
    """Tests for forward placement."""

    def test_top_and_height(self, mapper):
        placement = mapper.place(at(9), at(10), DAY)
        assert placement.top == 80
        assert placement.height == 80

    def test_clipped_at_window_start(self, mapper):
        placement = mapper.place(at(7), at(9), DAY)
        assert placement.top == 0
        assert placement.height == 80
        assert mapper.is_clipped(at(7), at(9), DAY)

    def test_clipped_at_window_end(self, mapper):
        placement = mapper.place(at(19), at(21), DAY)
        assert placement.top + placement.height == mapper.column_height

    def test_entirely_outside_is_omitted(self, mapper):
        assert mapper.place(at(6), at(7), DAY) is None
        assert mapper.place(at(20), at(21), DAY) is None

    def test_other_day_is_omitted(self, mapper):
        assert mapper.place(at(9, day=DAY + timedelta(days=1)), at(10, day=DAY + timedelta(days=1)), DAY) is None

    def test_degenerate_is_omitted(self, mapper):
        assert mapper.place(at(10), at(10), DAY) is None
        assert mapper.place(at(11), at(10), DAY) is None

    def test_minimum_height(self, mapper):
        """Five-minute bookings stay tappable."""
        placement = mapper.place(at(9), at(9, 5), DAY)
        assert placement.height == mapper.min_height == 20

    def test_not_clipped_inside(self, mapper):
        assert not mapper.is_clipped(at(9), at(10), DAY)


class TestInverse:
    """Tests for the pixel -> time inverse."""

    @pytest.mark.parametrize("hour,minute", [(8, 0), (9, 30), (13, 0), (19, 30)])
    def test_invertible_on_slot_boundaries(self, mapper, hour, minute):
        top = mapper.place(at(hour, minute), at(hour, minute) + timedelta(minutes=30), DAY).top
        assert mapper.snap_time(top, DAY) == at(hour, minute)
        assert mapper.time_at(top, DAY) == at(hour, minute)

    def test_snaps_to_nearest_slot(self, mapper):
        # 95px is 71.25 minutes past 08:00, nearest boundary 09:00
        assert mapper.snap_time(95, DAY) == at(9)
        assert mapper.snap_time(105, DAY) == at(9, 30)

    def test_snap_clamps_inside_window(self, mapper):
        assert mapper.snap_time(-50, DAY) == at(8)
        assert mapper.snap_time(5000, DAY) == at(19, 30)
        assert mapper.snap_time(5000, DAY, include_end=True) == at(20)


class TestAssignLanes:
    """Tests for assign_lanes function."""

    @staticmethod
    def lanes(intervals):
        out = assign_lanes(intervals, lambda i: i[0], lambda i: i[1])
        return {item: (lane, count) for item, lane, count in out}

    def test_disjoint_items_share_lane_zero(self):
        result = self.lanes([(at(9), at(10)), (at(10), at(11))])
        assert set(result.values()) == {(0, 1)}

    def test_overlap_group_gets_two_lanes(self):
        a, b = (at(9), at(10)), (at(9, 30), at(10, 30))
        result = self.lanes([b, a])
        assert result[a] == (0, 2)
        assert result[b] == (1, 2)

    def test_first_fit_reuses_freed_lane(self):
        a = (at(9), at(12))
        b = (at(9), at(10))
        c = (at(10), at(11))
        result = self.lanes([a, b, c])
        # sorted by (start, end): b takes lane 0, a lane 1, c reuses lane 0
        assert result[b] == (0, 2)
        assert result[a] == (1, 2)
        assert result[c] == (0, 2)

    def test_empty(self):
        assert assign_lanes([], lambda i: i, lambda i: i) == []
