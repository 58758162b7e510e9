"""Launch behaviour keys: RunAtLoad, KeepAlive and ThrottleInterval."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

__all__ = ["KeepAliveConfig", "LaunchBehavior"]


class KeepAliveConfig(BaseModel):
    enabled: bool = True
    crashed: bool | None = None
    successful_exit: bool | None = None

    def as_plist(self) -> bool | dict[str, bool]:
        """Return the launchd ``KeepAlive`` representation.

        A bare boolean unless a condition was given, in which case launchd
        expects a dictionary of conditions.
        """
        conditions: dict[str, bool] = {}
        if self.successful_exit is not None:
            conditions["SuccessfulExit"] = self.successful_exit
        if self.crashed is not None:
            conditions["Crashed"] = self.crashed
        if not conditions:
            return self.enabled
        return conditions


class LaunchBehavior(BaseModel):
    model_config = ConfigDict(validate_assignment=True, populate_by_name=True)

    run_at_load: bool | None = Field(None, alias="RunAtLoad")
    keep_alive: KeepAliveConfig | None = None
    throttle_interval: int | None = Field(None, alias="ThrottleInterval", ge=0)

    def to_plist_dict(self) -> dict[str, Any]:
        plist: dict[str, Any] = {}
        if self.run_at_load is not None:
            plist["RunAtLoad"] = self.run_at_load
        if self.keep_alive is not None:
            plist["KeepAlive"] = self.keep_alive.as_plist()
        if self.throttle_interval is not None:
            plist["ThrottleInterval"] = self.throttle_interval
        return plist
