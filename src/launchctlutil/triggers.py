"""Time based launchd triggers."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from . import cron

__all__ = ["TimeTriggers"]


class TimeTriggers(BaseModel):
    model_config = ConfigDict(validate_assignment=True, populate_by_name=True)

    start_interval: int = Field(0, alias="StartInterval", ge=0)
    minute_of_hour: int | None = Field(None, ge=0, le=59)
    calendar_entries: list[dict[str, int]] = Field(default_factory=list)

    def set_start_interval(self, seconds: int) -> None:
        self.start_interval = seconds

    def set_minute_of_hour(self, minute: int) -> None:
        self.minute_of_hour = minute

    def add_calendar_entry(
        self,
        *,
        minute: int | None = None,
        hour: int | None = None,
        day: int | None = None,
        weekday: int | None = None,
        month: int | None = None,
    ) -> None:
        entry: dict[str, int] = {}
        if minute is not None:
            cron.validate_range("Minute", minute, 0, 59)
            entry["Minute"] = minute
        if hour is not None:
            cron.validate_range("Hour", hour, 0, 23)
            entry["Hour"] = hour
        if day is not None:
            cron.validate_range("Day", day, 1, 31)
            entry["Day"] = day
        if weekday is not None:
            cron.validate_range("Weekday", weekday, 0, 7)
            entry["Weekday"] = weekday
        if month is not None:
            cron.validate_range("Month", month, 1, 12)
            entry["Month"] = month
        if not entry:
            msg = "A calendar entry needs at least one field"
            raise ValueError(msg)
        self.calendar_entries.append(entry)

    def add_cron(self, expr: str) -> None:
        self.calendar_entries.extend(cron.expand(expr))

    def entries(self) -> list[dict[str, int]]:
        """All calendar entries, the minute-of-hour entry first."""
        out: list[dict[str, int]] = []
        if self.minute_of_hour is not None:
            out.append({"Minute": self.minute_of_hour})
        out.extend(dict(e) for e in self.calendar_entries)
        return out

    def to_plist_dict(self) -> dict[str, Any]:
        plist: dict[str, Any] = {}
        if self.start_interval > 0:
            plist["StartInterval"] = self.start_interval
        entries = self.entries()
        if len(entries) == 1:
            plist["StartCalendarInterval"] = entries[0]
        elif entries:
            plist["StartCalendarInterval"] = entries
        return plist
