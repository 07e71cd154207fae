"""Centralized configuration for the clinicgrid package.

Provides paths, grid defaults, and environment configuration
used across all modules.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Package root (clinicgrid/ directory)
PACKAGE_ROOT = Path(__file__).parent

# Working directory (where the user runs the CLI from)
WORKING_DIR = Path.cwd()

# Load environment variables from current working directory
# so .env is found where the user runs clinicgrid, not in site-packages
load_dotenv(WORKING_DIR / ".env")


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


# Directory paths
SCHEDULES_DIR = WORKING_DIR / "schedules"
TEMPLATES_DIR = PACKAGE_ROOT / "web" / "templates"

# Visible window (hours of day, end exclusive)
DEFAULT_START_HOUR = int(os.getenv("CLINICGRID_START_HOUR", "8"))
DEFAULT_END_HOUR = int(os.getenv("CLINICGRID_END_HOUR", "20"))

# Grid granularity
DEFAULT_SLOT_MINUTES = int(os.getenv("CLINICGRID_SLOT_MINUTES", "30"))
DEFAULT_SLOT_HEIGHT = float(os.getenv("CLINICGRID_SLOT_HEIGHT", "40"))  # pixels

# Business hours highlight (Mon-Fri, end exclusive)
BUSINESS_START_HOUR = int(os.getenv("CLINICGRID_BUSINESS_START", "9"))
BUSINESS_END_HOUR = int(os.getenv("CLINICGRID_BUSINESS_END", "18"))

# Double-booking policy; false permits intentional overbooking
ENFORCE_AVAILABILITY = _env_bool("CLINICGRID_ENFORCE_AVAILABILITY", "true")

# No-show risk (0-100 points) at or above this is flagged on the grid
HIGH_RISK_THRESHOLD = float(os.getenv("CLINICGRID_HIGH_RISK", "70"))

# Logging
LOG_LEVEL = os.getenv("CLINICGRID_LOG_LEVEL", "INFO")

# Web adapter
DEFAULT_HOST = os.getenv("CLINICGRID_HOST", "127.0.0.1")
DEFAULT_PORT = int(os.getenv("CLINICGRID_PORT", "8000"))
