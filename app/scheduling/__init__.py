"""Scheduling core: window validation, court conflicts, roster, status machine."""

from app.scheduling.conflict import check_conflict, check_courts, windows_overlap
from app.scheduling.hours import OperatingRange, decode_operating_ranges
from app.scheduling.validator import SchedulingConfig, validate_against_operating_ranges, validate_window

__all__ = [
    "OperatingRange",
    "SchedulingConfig",
    "check_conflict",
    "check_courts",
    "decode_operating_ranges",
    "validate_against_operating_ranges",
    "validate_window",
    "windows_overlap",
]
