"""Built launchd configurations and where they live on disk."""

from __future__ import annotations

import logging
import os
import plistlib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict

from .errors import ConfigurationError
from .kind import Kind
from .launchctl import LaunchctlClient, require_root

__all__ = ["DAEMON_INSTALL_LOCATION", "Configuration", "config_file_path"]

logger = logging.getLogger(__name__)

DAEMON_INSTALL_LOCATION = Path("/Library/LaunchDaemons")


def _install_directory(kind: Kind) -> Path:
    if kind == Kind.USER_AGENT:
        home = os.environ.get("HOME")
        if not home:
            msg = "Failed to determine HOME for UserAgent launchctl configuration"
            raise ConfigurationError(msg)
        return Path(home) / "Library" / "LaunchAgents"
    if kind == Kind.DAEMON:
        return DAEMON_INSTALL_LOCATION
    msg = "An unknown launchctl configuration type was specified"
    raise ConfigurationError(msg)


def config_file_path(label: str, kind: Kind) -> Path:
    return _install_directory(kind) / f"{label}.plist"


class Configuration(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    contents: str
    kind: Kind = Kind.USER_AGENT

    def file_path(self) -> Path:
        return config_file_path(self.label, self.kind)

    def to_plist_dict(self) -> dict[str, Any]:
        return plistlib.loads(self.contents.encode("utf-8"))

    def is_installed(self, launchctl: LaunchctlClient | None = None) -> bool:
        """Whether launchd knows the label and the file on disk matches ``contents``."""
        require_root(self.kind)
        launchctl = launchctl or LaunchctlClient()

        if self.label not in launchctl.list():
            logger.debug("%s is not listed by launchctl", self.label)
            return False

        path = self.file_path()
        try:
            current = path.read_bytes()
        except FileNotFoundError:
            logger.debug("%s is listed but %s does not exist", self.label, path)
            return False
        return current == self.contents.encode("utf-8")
