from __future__ import annotations

from enum import StrEnum

__all__ = ["Kind"]


class Kind(StrEnum):
    """The launchd scope a service is installed into."""

    USER_AGENT = "user_agent"
    DAEMON = "daemon"
