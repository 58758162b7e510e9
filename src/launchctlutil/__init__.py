from importlib.metadata import version

from .builder import ConfigurationBuilder
from .configuration import Configuration, config_file_path
from .errors import (
    ConfigurationError,
    InstallVerificationError,
    InvalidPropertyListError,
    LaunchctlCommandError,
    LaunchctlNotFoundError,
    LaunchdServiceError,
    RootRequiredError,
)
from .kind import Kind
from .launchctl import LaunchctlClient
from .service import LaunchdService, current_status, install, is_installed, remove, start, stop
from .status import Status, StatusDetails

__all__ = [
    "Configuration",
    "ConfigurationBuilder",
    "ConfigurationError",
    "InstallVerificationError",
    "InvalidPropertyListError",
    "Kind",
    "LaunchctlClient",
    "LaunchctlCommandError",
    "LaunchctlNotFoundError",
    "LaunchdService",
    "LaunchdServiceError",
    "RootRequiredError",
    "Status",
    "StatusDetails",
    "__version__",
    "config_file_path",
    "current_status",
    "install",
    "is_installed",
    "remove",
    "start",
    "stop",
]

__version__ = version("launchctlutil")
