"""Fluent builder for launchd service configurations.

Example::

    config = (
        ConfigurationBuilder()
        .set_kind(Kind.USER_AGENT)
        .set_label("com.testing")
        .set_run_at_load(True)
        .set_command("echo")
        .add_argument("Hello world!")
        .set_log_parent_path("/tmp")
        .build()
    )
"""

from __future__ import annotations

import plistlib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .behavior import KeepAliveConfig, LaunchBehavior
from .configuration import Configuration
from .errors import ConfigurationError
from .kind import Kind
from .triggers import TimeTriggers

__all__ = ["ConfigurationBuilder", "ProcessIdentity"]


class ProcessIdentity(BaseModel):
    model_config = ConfigDict(validate_assignment=True, populate_by_name=True)

    user_name: str = Field("", alias="UserName")
    group_name: str = Field("", alias="GroupName")
    init_groups: bool | None = Field(None, alias="InitGroups")
    umask: int | None = Field(None, alias="Umask", ge=0, le=0o777)

    def to_plist_dict(self) -> dict[str, Any]:
        plist: dict[str, Any] = {}
        if self.user_name:
            plist["UserName"] = self.user_name
        if self.group_name:
            plist["GroupName"] = self.group_name
        if self.init_groups is not None:
            plist["InitGroups"] = self.init_groups
        if self.umask is not None:
            plist["Umask"] = self.umask
        return plist


class ConfigurationBuilder:
    """Collects launchd options and renders them as a plist document.

    Options that were never set are left out of the document. Keys are
    always emitted in the same order, so building the same options twice
    yields identical contents.
    """

    def __init__(self) -> None:
        self.label = ""
        self.kind = Kind.USER_AGENT
        self.command = ""
        self.arguments: list[str] = []
        self.environment: dict[str, str] = {}
        self.working_directory = ""
        self.log_parent_path = ""
        self.stderr_path = ""
        self.stdout_path = ""
        self.identity = ProcessIdentity()
        self.time = TimeTriggers()
        self.behavior = LaunchBehavior()

    def set_label(self, label: str) -> ConfigurationBuilder:
        self.label = label
        return self

    def set_command(self, command: str) -> ConfigurationBuilder:
        self.command = command
        return self

    def add_environment_variable(self, name: str, value: str) -> ConfigurationBuilder:
        self.environment[name] = value
        return self

    def add_argument(self, value: str) -> ConfigurationBuilder:
        self.arguments.append(value)
        return self

    def set_log_parent_path(self, log_parent_path: Path | str) -> ConfigurationBuilder:
        """Send stdout and stderr to ``<log_parent_path>/<label>.log``.

        Overrides :meth:`set_standard_error_path` and :meth:`set_standard_out_path`.
        """
        self.log_parent_path = str(log_parent_path)
        return self

    def set_standard_error_path(self, file_path: Path | str) -> ConfigurationBuilder:
        self.stderr_path = str(file_path)
        return self

    def set_standard_out_path(self, file_path: Path | str) -> ConfigurationBuilder:
        self.stdout_path = str(file_path)
        return self

    def set_kind(self, kind: Kind) -> ConfigurationBuilder:
        self.kind = Kind(kind)
        return self

    def set_start_interval(self, seconds: int) -> ConfigurationBuilder:
        self.time.set_start_interval(seconds)
        return self

    def set_start_calendar_interval_minute(self, minute_of_each_hour: int) -> ConfigurationBuilder:
        """Run at this minute of every hour, e.g. 10 gives 01:10, 02:10, ..."""
        self.time.set_minute_of_hour(minute_of_each_hour)
        return self

    def add_calendar_entry(
        self,
        *,
        minute: int | None = None,
        hour: int | None = None,
        day: int | None = None,
        weekday: int | None = None,
        month: int | None = None,
    ) -> ConfigurationBuilder:
        self.time.add_calendar_entry(minute=minute, hour=hour, day=day, weekday=weekday, month=month)
        return self

    def add_cron(self, expr: str) -> ConfigurationBuilder:
        self.time.add_cron(expr)
        return self

    def set_run_at_load(self, enabled: bool) -> ConfigurationBuilder:  # noqa: FBT001
        self.behavior.run_at_load = enabled
        return self

    def set_keep_alive(
        self,
        enabled: bool = True,  # noqa: FBT001, FBT002
        *,
        crashed: bool | None = None,
        successful_exit: bool | None = None,
    ) -> ConfigurationBuilder:
        self.behavior.keep_alive = KeepAliveConfig(enabled=enabled, crashed=crashed, successful_exit=successful_exit)
        return self

    def set_throttle_interval(self, seconds: int) -> ConfigurationBuilder:
        self.behavior.throttle_interval = seconds
        return self

    def set_user_name(self, user_name: str) -> ConfigurationBuilder:
        self.identity.user_name = user_name
        return self

    def set_group_name(self, group_name: str) -> ConfigurationBuilder:
        self.identity.group_name = group_name
        return self

    def set_init_groups(self, enabled: bool) -> ConfigurationBuilder:  # noqa: FBT001
        """Whether launchd calls initgroups(3) before starting the service."""
        self.identity.init_groups = enabled
        return self

    def set_umask(self, umask: int) -> ConfigurationBuilder:
        self.identity.umask = umask
        return self

    def set_working_directory(self, path: Path | str) -> ConfigurationBuilder:
        self.working_directory = str(path)
        return self

    def _log_paths(self) -> dict[str, str]:
        if self.log_parent_path:
            combined = str(Path(self.log_parent_path) / f"{self.label}.log")
            return {"StandardOutPath": combined, "StandardErrorPath": combined}
        paths: dict[str, str] = {}
        if self.stderr_path:
            paths["StandardErrorPath"] = self.stderr_path
        if self.stdout_path:
            paths["StandardOutPath"] = self.stdout_path
        return paths

    def to_plist_dict(self) -> dict[str, Any]:
        plist: dict[str, Any] = {"Label": self.label}
        if self.environment:
            plist["EnvironmentVariables"] = dict(self.environment)
        plist.update(self.identity.to_plist_dict())
        if self.working_directory:
            plist["WorkingDirectory"] = self.working_directory
        if self.command:
            plist["ProgramArguments"] = [self.command, *self.arguments]
        plist.update(self._log_paths())
        plist.update(self.time.to_plist_dict())
        plist.update(self.behavior.to_plist_dict())
        return plist

    def build(self) -> Configuration:
        if not self.label:
            msg = "A launchd configuration requires a label"
            raise ConfigurationError(msg)
        contents = plistlib.dumps(self.to_plist_dict(), sort_keys=False).decode("utf-8")
        return Configuration(label=self.label, contents=contents, kind=self.kind)
