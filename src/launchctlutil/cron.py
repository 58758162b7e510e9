"""Cron expression expansion into launchd calendar entries."""

from __future__ import annotations

import re

from croniter import croniter

__all__ = ["expand", "validate_range"]

# (plist key, lowest, highest) for each of the five cron fields
_FIELDS = (
    ("Minute", 0, 59),
    ("Hour", 0, 23),
    ("Day", 1, 31),
    ("Month", 1, 12),
    ("Weekday", 0, 7),
)

_NAMES = {
    "Month": {
        m: i
        for i, m in enumerate(
            ("JAN", "FEB", "MAR", "APR", "MAY", "JUN", "JUL", "AUG", "SEP", "OCT", "NOV", "DEC"), start=1
        )
    },
    "Weekday": {d: i for i, d in enumerate(("SUN", "MON", "TUE", "WED", "THU", "FRI", "SAT"))},
}
_NAME_RE = re.compile(r"[A-Za-z]{3}")


def validate_range(name: str, value: int, lo: int, hi: int) -> None:
    if not (lo <= value <= hi):
        msg = f"{name} must be in [{lo}, {hi}]"
        raise ValueError(msg)


def _replace_names(name: str, field: str) -> str:
    names = _NAMES.get(name, {})

    def sub(m: re.Match[str]) -> str:
        key = m.group(0).upper()
        if key not in names:
            msg = f"Unknown {name} name: {m.group(0)}"
            raise ValueError(msg)
        return str(names[key])

    return _NAME_RE.sub(sub, field)


def _parse_field(name: str, field: str, lo: int, hi: int) -> list[int]:
    field = _replace_names(name, field)
    if field == "*":
        return list(range(lo, hi + 1))
    values: set[int] = set()
    for part in field.split(","):
        if "/" in part:
            base, step_s = part.split("/")
            step = int(step_s)
            if step <= 0:
                msg = f"{name} step must be > 0"
                raise ValueError(msg)
            start = lo if base == "*" else int(base.split("-")[0])
            end = int(base.split("-")[1]) if "-" in base else hi
            values.update(range(start, end + 1, step))
        elif "-" in part:
            start, end = map(int, part.split("-"))
            values.update(range(start, end + 1))
        else:
            values.add(int(part))
    for v in values:
        validate_range(name, v, lo, hi)
    return sorted(values)


def expand(expr: str) -> list[dict[str, int]]:
    """Expand a five-field cron expression to ``StartCalendarInterval`` entries.

    Wildcard fields are left out of the entries, so ``"0 6 * * *"`` becomes
    ``[{"Minute": 0, "Hour": 6}]`` rather than one entry per day.
    """
    if not croniter.is_valid(expr):
        msg = f"Invalid cron expression: {expr}"
        raise ValueError(msg)
    fields = expr.split()
    if len(fields) != len(_FIELDS):
        msg = f"Invalid cron expression: {expr}"
        raise ValueError(msg)

    entries: list[dict[str, int]] = [{}]
    for raw, (name, lo, hi) in zip(fields, _FIELDS, strict=True):
        if raw == "*":
            continue
        try:
            values = _parse_field(name, raw, lo, hi)
        except ValueError as e:
            msg = f"Invalid cron expression: {expr}"
            raise ValueError(msg) from e
        entries = [{**entry, name: v} for entry in entries for v in values]
    return entries
