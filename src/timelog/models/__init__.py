"""Domain records for the time log core."""

from timelog.models.audit import AuditAction, AuditEntityType, AuditLog
from timelog.models.rate_card import RateCard
from timelog.models.time_entry import TimeCategoryType, TimeEntry, TimeEntryStatus
from timelog.models.time_lock import TimeLock
from timelog.models.timesheet import TimeCategory, Timesheet

__all__ = [
    "AuditAction",
    "AuditEntityType",
    "AuditLog",
    "RateCard",
    "TimeCategory",
    "TimeCategoryType",
    "TimeEntry",
    "TimeEntryStatus",
    "TimeLock",
    "Timesheet",
]
