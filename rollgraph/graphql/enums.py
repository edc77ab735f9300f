from enum import Enum
from typing import Any

import strawberry


class _ParseMixin:
    @classmethod
    def parse(cls, value: Any):
        """Enum member for an upstream value, None when unknown"""
        try:
            return cls(value)
        except ValueError:
            return None


@strawberry.enum
class AccessLevel(_ParseMixin, Enum):
    standard = strawberry.enum_value(
        "standard",
        description="standard is the only access level you can choose in the UI",
    )
    view = strawberry.enum_value(
        "view", description="view gives the team read-only access"
    )
    light = strawberry.enum_value(
        "light",
        description="light gives the team read and write access, but not to all settings",
    )
    everyone = strawberry.enum_value(
        "everyone", description="everyone is not in the Rollbar API documentation"
    )
    owner = strawberry.enum_value(
        "owner", description="owner is not in the Rollbar API documentation"
    )


# Numeric levels used by Rollbar internally
_NUMERIC_LEVELS = {10: "debug", 20: "info", 30: "warning", 40: "error", 50: "critical"}


@strawberry.enum
class Level(_ParseMixin, Enum):
    debug = "debug"
    info = "info"
    warning = "warning"
    error = "error"
    critical = "critical"

    @classmethod
    def parse(cls, value: Any):
        if isinstance(value, int) and not isinstance(value, bool):
            value = _NUMERIC_LEVELS.get(value)
        return super().parse(value)


@strawberry.enum
class Status(_ParseMixin, Enum):
    active = "active"
    resolved = "resolved"
    muted = "muted"
    archived = "archived"


@strawberry.enum
class RqlStatus(_ParseMixin, Enum):
    new = "new"
    running = "running"
    success = "success"
    failed = "failed"
    cancelled = "cancelled"
    timed_out = "timed_out"
    deleted = "deleted"
