"""YAML schedule documents.

A schedule file carries what a caller would supply at render time:

    name: Downtown clinic
    date: 2025-01-15
    view: week
    enforce_availability: true
    settings:
      start_hour: 8
      end_hour: 18
    resources:
      - {id: dr-maria, title: Dr. Maria Ionescu}
    events:
      - id: "1"
        title: Initial consultation
        start: 2025-01-15T09:00:00
        end: 2025-01-15T09:30:00
        resource_id: dr-maria
        status: confirmed
"""

import datetime as dt
import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator

from clinicgrid.config import ENFORCE_AVAILABILITY
from clinicgrid.constants import ViewType
from clinicgrid.models import Appointment, Resource, SchedulerSettings
from clinicgrid.scheduling import RenderScheduler, SchedulerCallbacks

logger = logging.getLogger(__name__)


class ScheduleLoadError(Exception):
    """Error loading, parsing or validating a schedule file."""

    pass


class ScheduleFile(BaseModel):
    """Validated schedule document."""

    name: str = Field(default="unnamed")
    focus_date: dt.date | None = Field(
        default=None, alias="date", description="Initial focus date"
    )
    view: ViewType = ViewType.WEEK
    enforce_availability: bool = ENFORCE_AVAILABILITY
    settings: SchedulerSettings = Field(default_factory=SchedulerSettings)
    resources: list[Resource] = Field(default_factory=list)
    events: list[Appointment] = Field(default_factory=list)

    model_config = {"populate_by_name": True}

    @model_validator(mode="after")
    def validate_unique_ids(self) -> "ScheduleFile":
        """Reject duplicate resource or event ids."""
        for label, ids in (
            ("resource", [r.id for r in self.resources]),
            ("event", [e.id for e in self.events]),
        ):
            seen = set()
            for item_id in ids:
                if item_id in seen:
                    raise ValueError(f"Duplicate {label} id '{item_id}'")
                seen.add(item_id)
        return self

    def unknown_resource_events(self) -> list[Appointment]:
        """Events pointing at a resource that is not declared."""
        known = {r.id for r in self.resources}
        return [e for e in self.events if e.resource_id and e.resource_id not in known]

    def build_scheduler(
        self,
        callbacks: SchedulerCallbacks | None = None,
        current_date: dt.date | None = None,
        view: ViewType | str | None = None,
    ) -> RenderScheduler:
        """Create a scheduler fed with this document's resources and events."""
        return RenderScheduler(
            resources=self.resources,
            events=self.events,
            view=view or self.view,
            enforce_availability=self.enforce_availability,
            settings=self.settings,
            callbacks=callbacks,
            current_date=current_date or self.focus_date,
        )


def load_schedule_config(path: str | Path) -> dict[str, Any] | None:
    """Load and parse a schedule YAML file without validation.

    Returns:
        Parsed YAML dict, or None if the file is empty

    Raises:
        ScheduleLoadError: If the file is missing or not valid YAML
    """
    path = Path(path)

    if not path.exists():
        raise ScheduleLoadError(f"Schedule file not found: {path}")

    try:
        with open(path) as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ScheduleLoadError(f"Invalid YAML in {path}: {e}") from e


def load_schedule(path: str | Path) -> ScheduleFile:
    """Load and validate a schedule file.

    Raises:
        ScheduleLoadError: If the file is missing, empty, invalid YAML,
            or fails schema validation
    """
    config = load_schedule_config(path)
    if config is None:
        raise ScheduleLoadError(f"Empty YAML file: {path}")
    if not isinstance(config, dict):
        raise ScheduleLoadError(f"Schedule must be a mapping: {path}")

    try:
        schedule = ScheduleFile.model_validate(config)
    except ValidationError as e:
        raise ScheduleLoadError(f"Invalid schedule {path}:\n{e}") from e

    logger.debug(
        f"Loaded schedule '{schedule.name}' with {len(schedule.resources)} resources "
        f"and {len(schedule.events)} events"
    )
    return schedule


def save_schedule(schedule: ScheduleFile, path: str | Path) -> Path:
    """Write a schedule back to YAML."""
    path = Path(path)
    data = schedule.model_dump(mode="json", exclude_none=True, by_alias=True)
    with open(path, "w") as f:
        yaml.safe_dump(data, f, sort_keys=False, allow_unicode=True)
    return path
