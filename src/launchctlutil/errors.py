"""Exceptions raised by launchctlutil."""

from __future__ import annotations

from collections.abc import Sequence

__all__ = [
    "ConfigurationError",
    "InstallVerificationError",
    "InvalidPropertyListError",
    "LaunchctlCommandError",
    "LaunchctlNotFoundError",
    "LaunchdServiceError",
    "RootRequiredError",
]


class LaunchdServiceError(Exception):
    pass


class ConfigurationError(LaunchdServiceError, ValueError):
    pass


class RootRequiredError(LaunchdServiceError, PermissionError):
    pass


class LaunchctlNotFoundError(LaunchdServiceError):
    pass


class LaunchctlCommandError(LaunchdServiceError):
    """``launchctl`` exited unsuccessfully or reported a failure in its output."""

    def __init__(self, args: Sequence[str], returncode: int | None, output: str, reason: str | None = None):
        self.command_args = list(args)
        self.returncode = returncode
        self.output = output
        if reason is None:
            reason = f"launchctl {' '.join(self.command_args)} exited with status {returncode}"
        super().__init__(f"{reason} - Output: {output}")


class InvalidPropertyListError(LaunchctlCommandError):
    pass


class InstallVerificationError(LaunchdServiceError):
    pass
