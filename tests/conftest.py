"""Shared test fixtures for clinicgrid tests."""

from datetime import date, datetime, time, timedelta
from pathlib import Path

import pytest
import yaml

from clinicgrid.constants import ViewType
from clinicgrid.models import Appointment, Resource, SchedulerSettings
from clinicgrid.scheduling import RenderScheduler, SchedulerCallbacks

# Wednesday; its week runs Mon 13 .. Sun 19 January 2025
FOCUS_DAY = date(2025, 1, 15)
MONDAY = date(2025, 1, 13)


def at(day: date, hour: int, minute: int = 0) -> datetime:
    return datetime.combine(day, time(hour, minute))


class CallbackRecorder:
    """Collects every scheduler callback invocation."""

    def __init__(self):
        self.moves = []
        self.resizes = []
        self.selections = []
        self.ranges = []
        self.selected = []
        self.rejections = []

    def callbacks(self) -> SchedulerCallbacks:
        return SchedulerCallbacks(
            on_move=lambda appt, intent: self.moves.append((appt, intent)),
            on_resize=lambda appt, intent: self.resizes.append((appt, intent)),
            on_select_slot=self.selections.append,
            on_dates_change=self.ranges.append,
            on_select_event=self.selected.append,
            on_reject=self.rejections.append,
        )


@pytest.fixture
def settings() -> SchedulerSettings:
    """Explicit grid geometry, independent of the environment."""
    return SchedulerSettings(
        start_hour=8,
        end_hour=20,
        slot_minutes=30,
        slot_height=40,
        business_start_hour=9,
        business_end_hour=18,
        high_risk_threshold=70,
    )


@pytest.fixture
def y_at(settings):
    """Pixel offset of a time of day on the test grid."""

    def _y(hour: int, minute: int = 0) -> float:
        minutes = hour * 60 + minute - settings.start_hour * 60
        return minutes / settings.slot_minutes * settings.slot_height

    return _y


@pytest.fixture
def resources() -> list[Resource]:
    return [
        Resource(id="dr-maria", title="Dr. Maria Ionescu"),
        Resource(id="dr-andrei", title="Dr. Andrei Popa"),
    ]


@pytest.fixture
def appointments() -> list[Appointment]:
    """A at 09:00-10:00 and B at 10:30-11:30 on dr-maria, C on dr-andrei."""
    return [
        Appointment(
            id="a",
            title="Consultation",
            start=at(FOCUS_DAY, 9),
            end=at(FOCUS_DAY, 10),
            resource_id="dr-maria",
            status="confirmed",
        ),
        Appointment(
            id="b",
            title="Filling",
            start=at(FOCUS_DAY, 10, 30),
            end=at(FOCUS_DAY, 11, 30),
            resource_id="dr-maria",
            risk_score=90,
        ),
        Appointment(
            id="c",
            title="Implant",
            start=at(FOCUS_DAY, 14),
            end=at(FOCUS_DAY, 16),
            resource_id="dr-andrei",
        ),
    ]


@pytest.fixture
def recorder() -> CallbackRecorder:
    return CallbackRecorder()


@pytest.fixture
def scheduler(resources, appointments, settings, recorder) -> RenderScheduler:
    """Day-view scheduler focused on FOCUS_DAY with a fixed clock."""
    return RenderScheduler(
        resources=resources,
        events=appointments,
        view=ViewType.DAY,
        enforce_availability=True,
        settings=settings,
        callbacks=recorder.callbacks(),
        current_date=FOCUS_DAY,
        clock=lambda: FOCUS_DAY,
    )


@pytest.fixture
def schedule_data() -> dict:
    """Raw schedule document as it would appear in YAML."""
    return {
        "name": "Test clinic",
        "date": FOCUS_DAY,
        "view": "day",
        "enforce_availability": True,
        "settings": {"start_hour": 8, "end_hour": 18, "slot_minutes": 30},
        "resources": [
            {"id": "dr-maria", "title": "Dr. Maria Ionescu"},
            {"id": "dr-andrei", "title": "Dr. Andrei Popa"},
        ],
        "events": [
            {
                "id": "1",
                "title": "Consultation",
                "start": at(FOCUS_DAY, 9),
                "end": at(FOCUS_DAY, 10),
                "resource_id": "dr-maria",
                "status": "confirmed",
            },
            {
                "id": "2",
                "title": "Filling",
                "start": at(FOCUS_DAY, 10, 30),
                "end": at(FOCUS_DAY, 11, 30),
                "resource_id": "dr-maria",
            },
            {
                "id": "3",
                "title": "Implant",
                "start": at(FOCUS_DAY, 9),
                "end": at(FOCUS_DAY, 9) + timedelta(hours=2),
                "resource_id": "dr-andrei",
            },
        ],
    }


@pytest.fixture
def schedule_file(tmp_path: Path, schedule_data) -> Path:
    """Schedule YAML written to a temporary directory."""
    path = tmp_path / "clinic.yaml"
    path.write_text(yaml.safe_dump(schedule_data, sort_keys=False))
    return path
