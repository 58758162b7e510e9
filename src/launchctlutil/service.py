"""High level service management for launchd."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from .errors import InstallVerificationError, LaunchctlCommandError, LaunchdServiceError
from .launchctl import LaunchctlClient, require_root
from .status import COULD_NOT_FIND_SERVICE_PREFIX, Status, StatusDetails, parse_list_output

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from .configuration import Configuration
    from .kind import Kind

__all__ = [
    "LaunchdService",
    "current_status",
    "install",
    "is_installed",
    "remove",
    "start",
    "stop",
]

logger = logging.getLogger(__name__)

PLIST_FILE_MODE = 0o600


def install(configuration: Configuration, launchctl: LaunchctlClient | None = None) -> None:
    """Write ``configuration`` to disk, load it and check that launchd picked it up."""
    require_root(configuration.kind)
    launchctl = launchctl or LaunchctlClient()
    plist_path = configuration.file_path()

    # A previous install may still be loaded; failures here usually just mean there was none.
    try:
        remove(plist_path, configuration.kind, launchctl)
    except (LaunchdServiceError, OSError) as e:
        logger.debug("Pre-install removal of %s failed: %s", plist_path, e)

    plist_path.parent.mkdir(parents=True, exist_ok=True)
    # mode is narrowed before any contents are written
    plist_path.touch(mode=PLIST_FILE_MODE, exist_ok=True)
    plist_path.chmod(PLIST_FILE_MODE)
    plist_path.write_bytes(configuration.contents.encode("utf-8"))

    launchctl.load(plist_path)

    # launchctl can exit 0 even when loading failed
    if not configuration.is_installed(launchctl):
        try:
            plist_path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Could not remove %s after failed install: %s", plist_path, e)
        msg = f"An unknown error occurred installing the launchctl config {configuration.label}"
        raise InstallVerificationError(msg)
    logger.info("Installed %s at %s", configuration.label, plist_path)


def remove(config_path: Path | str, kind: Kind, launchctl: LaunchctlClient | None = None) -> None:
    require_root(kind)
    launchctl = launchctl or LaunchctlClient()
    config_path = Path(config_path)
    launchctl.unload(config_path)
    config_path.unlink()
    logger.info("Removed %s", config_path)


def is_installed(configuration: Configuration, launchctl: LaunchctlClient | None = None) -> bool:
    return configuration.is_installed(launchctl)


def start(label: str, kind: Kind, launchctl: LaunchctlClient | None = None) -> None:
    require_root(kind)
    (launchctl or LaunchctlClient()).start(label)
    logger.info("Started %s", label)


def stop(label: str, kind: Kind, launchctl: LaunchctlClient | None = None) -> None:
    require_root(kind)
    (launchctl or LaunchctlClient()).stop(label)
    logger.info("Stopped %s", label)


def current_status(label: str, launchctl: LaunchctlClient | None = None) -> StatusDetails:
    launchctl = launchctl or LaunchctlClient()
    try:
        output = launchctl.list(label)
    except LaunchctlCommandError as e:
        if e.output.startswith(COULD_NOT_FIND_SERVICE_PREFIX):
            return StatusDetails(status=Status.NOT_INSTALLED)
        raise
    return parse_list_output(output)


class LaunchdService:
    """One launchd configuration bound to a ``launchctl`` client."""

    def __init__(self, configuration: Configuration, *, launchctl: LaunchctlClient | None = None):
        self.configuration = configuration
        self.launchctl = launchctl or LaunchctlClient()

    @property
    def label(self) -> str:
        return self.configuration.label

    @property
    def plist_path(self) -> Path:
        return self.configuration.file_path()

    def install(self) -> None:
        install(self.configuration, self.launchctl)

    def uninstall(self) -> None:
        remove(self.plist_path, self.configuration.kind, self.launchctl)

    def is_installed(self) -> bool:
        return is_installed(self.configuration, self.launchctl)

    def start(self) -> None:
        start(self.label, self.configuration.kind, self.launchctl)

    def stop(self) -> None:
        stop(self.label, self.configuration.kind, self.launchctl)

    def status(self) -> StatusDetails:
        return current_status(self.label, self.launchctl)
