"""Tests for clinicgrid.scheduling.arena module."""

from datetime import datetime

import pytest

from clinicgrid.models import Appointment, Position
from clinicgrid.scheduling.arena import AppointmentArena


def make(id: str, hour: int, resource_id: str | None = "r1") -> Appointment:
    return Appointment(
        id=id,
        title=id,
        start=datetime(2025, 1, 15, hour),
        end=datetime(2025, 1, 15, hour + 1),
        resource_id=resource_id,
    )


class TestAppointmentArena:
    """Tests for base data plus optimistic overlays."""

    def test_lookup(self):
        arena = AppointmentArena([make("a", 9), make("b", 10)])
        assert "a" in arena
        assert len(arena) == 2
        assert arena.get("b").start.hour == 10
        assert arena.get("zzz") is None

    def test_duplicate_ids_keep_last(self, caplog):
        arena = AppointmentArena([make("a", 9), make("a", 11)])
        assert len(arena) == 1
        assert arena.get("a").start.hour == 11
        assert "Duplicate appointment id 'a'" in caplog.text

    def test_optimistic_overlay(self):
        arena = AppointmentArena([make("a", 9)])
        arena.apply_optimistic(
            "a",
            Position(start=datetime(2025, 1, 15, 14), end=datetime(2025, 1, 15, 15), resource_id="r2"),
        )
        assert arena.is_pending("a")
        assert arena.get("a").resource_id == "r2"
        assert arena.original("a").resource_id == "r1"
        assert [a.start.hour for a in arena] == [14]

    def test_overlay_unknown_id_raises(self):
        arena = AppointmentArena()
        with pytest.raises(KeyError):
            arena.apply_optimistic(
                "x", Position(start=datetime(2025, 1, 15, 9), end=datetime(2025, 1, 15, 10))
            )

    def test_revert_is_idempotent(self):
        arena = AppointmentArena([make("a", 9)])
        arena.apply_optimistic(
            "a", Position(start=datetime(2025, 1, 15, 14), end=datetime(2025, 1, 15, 15))
        )
        first = arena.revert("a")
        second = arena.revert("a")
        assert first == second == make("a", 9).position
        assert not arena.is_pending("a")
        assert arena.revert("missing") is None

    def test_replace_all_clears_overlays(self):
        arena = AppointmentArena([make("a", 9)])
        arena.apply_optimistic(
            "a", Position(start=datetime(2025, 1, 15, 14), end=datetime(2025, 1, 15, 15))
        )
        arena.replace_all([make("a", 12)])
        assert not arena.is_pending("a")
        assert arena.get("a").start.hour == 12
