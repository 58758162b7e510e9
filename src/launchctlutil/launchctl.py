"""Thin wrapper around the ``launchctl`` binary."""

from __future__ import annotations

import logging
import os
import shutil
import subprocess  # noqa: S404
from pathlib import Path
from typing import TYPE_CHECKING

from .errors import (
    InvalidPropertyListError,
    LaunchctlCommandError,
    LaunchctlNotFoundError,
    RootRequiredError,
)
from .kind import Kind

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from collections.abc import Callable

__all__ = ["LaunchctlClient", "is_root", "require_root"]

logger = logging.getLogger(__name__)

DEFAULT_LAUNCHCTL = Path("/bin/launchctl")
LAUNCHCTL_PATH_ENV = "LAUNCHCTL_PATH"
INVALID_PROPERTY_LIST_MARKER = ": Invalid property list"


def is_root() -> bool:
    return os.geteuid() == 0


def require_root(kind: Kind) -> None:
    """Raise unless the current user may manage services of ``kind``."""
    if kind == Kind.DAEMON and not is_root():
        msg = "Root privileges are required to do this"
        raise RootRequiredError(msg)


class LaunchctlClient:
    def __init__(
        self,
        path: Path | str | None = None,
        *,
        runner: Callable[..., subprocess.CompletedProcess] | None = None,
        timeout: float | None = 30,
    ):
        self.path = Path(path) if path else self._resolve_launchctl()
        self.timeout = timeout
        self._runner = runner or subprocess.run

    @staticmethod
    def _resolve_launchctl() -> Path:
        configured = os.environ.get(LAUNCHCTL_PATH_ENV)
        if configured:
            return Path(configured)

        if DEFAULT_LAUNCHCTL.exists():
            return DEFAULT_LAUNCHCTL

        found = shutil.which("launchctl")
        if found:
            try:
                return Path(found).resolve(strict=True)
            except OSError as e:
                msg = "`launchctl` binary cannot be found at /bin/launchctl or via PATH."
                raise LaunchctlNotFoundError(msg) from e
        msg = "`launchctl` binary cannot be found."
        raise LaunchctlNotFoundError(msg)

    def run(self, *args: str) -> str:
        """Run ``launchctl`` with ``args`` and return stdout and stderr combined."""
        cmd = [str(self.path), *args]
        logger.debug("Running %s", " ".join(cmd))
        try:
            res = self._runner(
                cmd,
                check=False,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            output = e.output if isinstance(e.output, str) else ""
            raise LaunchctlCommandError(args, None, output, reason=f"launchctl {' '.join(args)} timed out") from e
        except FileNotFoundError as e:
            msg = f"`launchctl` binary cannot be found at {self.path}."
            raise LaunchctlNotFoundError(msg) from e

        output = res.stdout or ""
        if res.returncode != 0:
            raise LaunchctlCommandError(args, res.returncode, output)
        # launchctl exits 0 for some failures, such as an unparsable plist
        if INVALID_PROPERTY_LIST_MARKER in output:
            raise InvalidPropertyListError(args, res.returncode, output, reason="Invalid property list")
        return output

    def load(self, plist_path: Path | str) -> str:
        return self.run("load", str(plist_path))

    def unload(self, plist_path: Path | str) -> str:
        return self.run("unload", str(plist_path))

    def start(self, label: str) -> str:
        return self.run("start", label)

    def stop(self, label: str) -> str:
        return self.run("stop", label)

    def list(self, label: str | None = None) -> str:
        if label is None:
            return self.run("list")
        return self.run("list", label)
