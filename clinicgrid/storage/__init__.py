"""Schedule file persistence."""

from clinicgrid.storage.schedule_file import (
    ScheduleFile,
    ScheduleLoadError,
    load_schedule,
    load_schedule_config,
    save_schedule,
)

__all__ = [
    "ScheduleFile",
    "ScheduleLoadError",
    "load_schedule",
    "load_schedule_config",
    "save_schedule",
]
