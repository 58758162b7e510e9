"""Parsing of ``launchctl list <label>`` output."""

from __future__ import annotations

import re
from enum import StrEnum

from pydantic import BaseModel

__all__ = [
    "Status",
    "StatusDetails",
    "parse_last_exit_status",
    "parse_list_output",
    "parse_pid",
]

COULD_NOT_FIND_SERVICE_PREFIX = "Could not find service "
LAST_EXIT_STATUS_PREFIX = '"LastExitStatus" = '
PID_PREFIX = '"PID" = '
LINE_SUFFIX = ";"
_INTEGER_RE = re.compile(r"-?[0-9]+")


class Status(StrEnum):
    UNKNOWN = "unknown"
    NOT_INSTALLED = "not_installed"
    RUNNING = "running"
    NOT_RUNNING = "not_running"


class StatusDetails(BaseModel):
    status: Status
    pid: int | None = None
    last_exit_status: int | None = None
    pid_error: str | None = None
    last_exit_status_error: str | None = None

    @property
    def got_pid(self) -> bool:
        return self.pid is not None and self.pid_error is None

    @property
    def got_last_exit_status(self) -> bool:
        return self.last_exit_status is not None and self.last_exit_status_error is None


def _parse_field(line: str, prefix: str) -> int:
    if not line.startswith(prefix):
        msg = f"Expected a line starting with {prefix!r}, got {line!r}"
        raise ValueError(msg)
    value = line.removeprefix(prefix).removesuffix(LINE_SUFFIX)
    if not _INTEGER_RE.fullmatch(value):
        msg = f"Expected an integer after {prefix!r}, got {value!r}"
        raise ValueError(msg)
    return int(value)


def parse_pid(line: str) -> int:
    """Parse ``"PID" = 123;`` (leading whitespace already stripped)."""
    return _parse_field(line, PID_PREFIX)


def parse_last_exit_status(line: str) -> int:
    """Parse ``"LastExitStatus" = 0;`` (leading whitespace already stripped)."""
    return _parse_field(line, LAST_EXIT_STATUS_PREFIX)


def parse_list_output(output: str) -> StatusDetails:
    details = StatusDetails(status=Status.NOT_RUNNING)
    for raw in output.splitlines():
        line = raw.strip()
        if line.startswith(LAST_EXIT_STATUS_PREFIX):
            try:
                details.last_exit_status = parse_last_exit_status(line)
            except ValueError as e:
                details.last_exit_status_error = str(e)
        elif line.startswith(PID_PREFIX):
            try:
                details.pid = parse_pid(line)
            except ValueError as e:
                details.pid_error = str(e)
    if details.got_pid:
        details.status = Status.RUNNING
    return details
