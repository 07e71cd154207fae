"""Tests for clinicgrid.scheduling.drag module."""

from datetime import date, datetime, time, timedelta

import pytest

from clinicgrid.constants import (
    DragHandle,
    DragMode,
    DragState,
    DropOutcome,
    RejectionReason,
)
from clinicgrid.models import Appointment, MoveIntent, ResizeIntent
from clinicgrid.scheduling.arena import AppointmentArena
from clinicgrid.scheduling.drag import (
    VALID_TRANSITIONS,
    DragMoveController,
    validate_transition,
)
from clinicgrid.scheduling.layout import LayoutMapper

DAY = date(2025, 1, 15)


def at(hour: int, minute: int = 0) -> datetime:
    return datetime.combine(DAY, time(hour, minute))


def y(hour: int, minute: int = 0) -> float:
    """Pixel offset on an 08:00 grid with 30-minute, 40px slots."""
    return ((hour - 8) * 60 + minute) / 30 * 40


@pytest.fixture
def arena() -> AppointmentArena:
    return AppointmentArena(
        [
            Appointment(id="a", title="Checkup", start=at(9), end=at(10), resource_id="r"),
            Appointment(id="b", title="Cleaning", start=at(12), end=at(13), resource_id="r"),
            Appointment(id="u", title="Walk-in", start=at(15), end=at(15, 30)),
        ]
    )


@pytest.fixture
def commits():
    return []


@pytest.fixture
def rejections():
    return []


@pytest.fixture
def controller(arena, commits, rejections) -> DragMoveController:
    return DragMoveController(
        arena,
        LayoutMapper(8 * 60, 20 * 60, 30, 40),
        enforce_availability=True,
        on_commit=lambda appt, intent: commits.append((appt, intent)),
        on_reject=rejections.append,
    )


class TestTransitions:
    """Tests for the transition table."""

    def test_terminal_states_return_to_idle(self):
        assert VALID_TRANSITIONS[DragState.COMMITTING] == [DragState.IDLE]
        assert VALID_TRANSITIONS[DragState.REVERTING] == [DragState.IDLE]

    def test_idle_cannot_commit(self):
        assert not validate_transition(DragState.IDLE, DragState.COMMITTING)
        assert validate_transition(DragState.IDLE, DragState.DRAGGING)


class TestBegin:
    """Tests for starting a gesture."""

    def test_begin_creates_session(self, controller):
        session = controller.begin("b")
        assert controller.state == DragState.DRAGGING
        assert session.original_start == at(12)
        assert session.mode == DragMode.MOVE
        assert session.handle is None

    def test_second_begin_rejected(self, controller):
        controller.begin("a")
        assert controller.begin("b") is None
        assert controller.session.appointment_id == "a"

    def test_unknown_id_rejected(self, controller):
        assert controller.begin("nope") is None
        assert controller.state == DragState.IDLE

    def test_degenerate_appointment_rejected(self, arena, controller):
        arena.replace_all(
            [Appointment(id="z", title="Broken", start=at(10), end=at(9), resource_id="r")]
        )
        assert controller.begin("z") is None

    def test_resize_defaults_to_end_handle(self, controller):
        session = controller.begin("a", mode=DragMode.RESIZE)
        assert session.handle == DragHandle.END


class TestMoveScenario:
    """A at 09:00-10:00 and B dragged onto 09:30-10:30, same resource."""

    def test_conflict_reverts_with_enforcement(self, controller, arena, commits, rejections):
        controller.begin("b")
        controller.hover((DAY, "r"), y(9, 30))
        result = controller.drop()

        assert result.outcome == DropOutcome.REVERTED
        assert result.rejection.reason == RejectionReason.CONFLICT
        assert result.rejection.conflicting_ids == ["a"]
        assert "overlaps 'Checkup'" in result.rejection.message
        assert arena.get("b").start == at(12)
        assert commits == []
        assert rejections == [result.rejection]
        assert controller.state == DragState.IDLE
        assert controller.session is None

    def test_commit_without_enforcement(self, controller, arena, commits):
        controller.enforce_availability = False
        controller.begin("b")
        controller.hover((DAY, "r"), y(9, 30))
        result = controller.drop()

        assert result.committed
        appt, intent = commits[0]
        assert isinstance(intent, MoveIntent)
        assert intent.new_start == at(9, 30)
        assert intent.new_end == at(10, 30)
        assert intent.new_resource_id == "r"
        assert appt.start == at(12)  # as it was before the move
        assert arena.is_pending("b")
        assert arena.get("b").start == at(9, 30)

    def test_duration_preserved(self, controller, commits):
        controller.begin("b")
        controller.hover((DAY, "r"), y(16, 10))
        controller.drop()
        intent = commits[0][1]
        assert intent.new_start == at(16)
        assert intent.new_end - intent.new_start == timedelta(hours=1)

    def test_move_to_other_resource(self, controller, commits):
        controller.begin("a")
        controller.hover((DAY, "other"), y(9))
        controller.drop()
        assert commits[0][1].new_resource_id == "other"

    def test_unassigned_column_clears_resource(self, controller, commits):
        controller.begin("a")
        controller.hover((DAY, None), y(11))
        controller.drop()
        assert commits[0][1].new_resource_id is None

    def test_resource_named_default_is_kept(self, controller, commits):
        controller.begin("a")
        controller.hover((DAY, "default"), y(11))
        controller.drop()
        assert commits[0][1].new_resource_id == "default"

    def test_unassigned_bucket_conflicts(self, controller):
        controller.begin("a")
        controller.hover((DAY, None), y(15))
        result = controller.drop()
        assert result.rejection.reason == RejectionReason.CONFLICT
        assert result.rejection.conflicting_ids == ["u"]

    def test_touching_drop_commits(self, controller, commits):
        """Ending exactly when A starts is allowed."""
        controller.begin("b")
        controller.hover((DAY, "r"), y(8))
        assert controller.drop().committed
        assert commits[0][1].new_end == at(9)

    def test_unchanged_drop_emits_nothing(self, controller, commits, arena):
        controller.begin("a")
        controller.hover((DAY, "r"), y(9))
        result = controller.drop()
        assert result.committed
        assert result.intent is None
        assert commits == []
        assert not arena.is_pending("a")


class TestRevertPaths:
    """Drops outside the grid, cancellation and vanished data."""

    def test_drop_outside_reverts(self, controller, rejections):
        controller.begin("a")
        controller.hover((DAY, "r"), y(14))
        controller.hover(None, 0)
        result = controller.drop()
        assert result.rejection.reason == RejectionReason.OUTSIDE_GRID
        assert result.rejection.restored.start == at(9)

    def test_drop_without_hover_reverts(self, controller):
        controller.begin("a")
        assert controller.drop().outcome == DropOutcome.REVERTED

    def test_cancel(self, controller, arena):
        controller.begin("a")
        controller.hover((DAY, "r"), y(14))
        result = controller.cancel()
        assert result.rejection.reason == RejectionReason.CANCELLED
        assert arena.get("a").start == at(9)
        assert controller.state == DragState.IDLE

    def test_cancel_while_idle(self, controller):
        assert controller.cancel() is None
        assert controller.drop() is None
        assert controller.hover((DAY, "r"), 0) is None

    def test_data_replaced_mid_gesture(self, controller, arena):
        controller.begin("a")
        controller.hover((DAY, "r"), y(14))
        arena.replace_all([])
        result = controller.drop()
        assert result.rejection.reason == RejectionReason.EXTERNAL

    def test_callback_error_still_resets(self, arena):
        def boom(appt, intent):
            raise RuntimeError("save failed")

        controller = DragMoveController(
            arena, LayoutMapper(480, 1200, 30, 40), on_commit=boom
        )
        controller.begin("a")
        controller.hover((DAY, "r"), y(14))
        with pytest.raises(RuntimeError):
            controller.drop()
        assert controller.state == DragState.IDLE
        assert controller.begin("a") is not None


class TestResize:
    """Tests for edge dragging."""

    def test_resize_end(self, controller, commits):
        controller.begin("a", mode=DragMode.RESIZE, handle=DragHandle.END)
        controller.hover((DAY, "r"), y(11))
        controller.drop()
        appt, intent = commits[0]
        assert isinstance(intent, ResizeIntent)
        assert intent.new_start == at(9)
        assert intent.new_end == at(11)

    def test_resize_start(self, controller, commits):
        controller.begin("a", mode=DragMode.RESIZE, handle="start")
        controller.hover((DAY, "r"), y(8, 30))
        controller.drop()
        intent = commits[0][1]
        assert intent.new_start == at(8, 30)
        assert intent.new_end == at(10)

    def test_resize_keeps_one_slot_minimum(self, controller, commits):
        controller.begin("a", mode=DragMode.RESIZE, handle=DragHandle.END)
        controller.hover((DAY, "r"), y(8))
        controller.drop()
        intent = commits[0][1]
        assert intent.new_end - intent.new_start == timedelta(minutes=30)

    def test_resize_ignores_target_resource(self, controller):
        controller.begin("a", mode=DragMode.RESIZE)
        session = controller.hover((DAY, "elsewhere"), y(10, 30))
        assert session.proposed_resource_id == "r"

    @pytest.mark.parametrize(
        "handle, edge_y, expected",
        [
            (DragHandle.START, y(8, 30), (at(8, 30), at(10))),
            (DragHandle.END, y(11), (at(9), at(11))),
        ],
    )
    def test_resize_over_other_day_stays_on_own_day(self, controller, handle, edge_y, expected):
        controller.begin("a", mode=DragMode.RESIZE, handle=handle)
        session = controller.hover((DAY + timedelta(days=1), "r"), edge_y)
        assert (session.proposed_start, session.proposed_end) == expected

    def test_resize_into_neighbour_conflicts(self, controller):
        controller.begin("a", mode=DragMode.RESIZE, handle=DragHandle.END)
        controller.hover((DAY, "r"), y(12, 30))
        result = controller.drop()
        assert result.rejection.reason == RejectionReason.CONFLICT
        assert "Cannot resize" in result.rejection.message
