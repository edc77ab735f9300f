"""
Rollbar response envelope and unwrap outcomes
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict


class Envelope(BaseModel):
    """Every Rollbar API response is wrapped as ``{"err": 0|1, "result": ...}``"""

    model_config = ConfigDict(extra="allow")

    err: int | bool = 0
    result: Any = None
    message: str | None = None

    @property
    def failed(self) -> bool:
        return bool(self.err)


class OutcomeKind(str, Enum):
    FOUND = "found"
    MISSING = "missing"  # request succeeded but nothing lives at the path
    FAILED = "failed"  # upstream answered with err set


class Outcome(BaseModel):
    """Result of unwrapping one envelope"""

    model_config = ConfigDict(frozen=True)

    kind: OutcomeKind
    value: Any = None
    message: str | None = None

    @classmethod
    def found(cls, value: Any) -> "Outcome":
        return cls(kind=OutcomeKind.FOUND, value=value)

    @classmethod
    def missing(cls) -> "Outcome":
        return cls(kind=OutcomeKind.MISSING)

    @classmethod
    def failed(cls, message: str | None = None) -> "Outcome":
        return cls(kind=OutcomeKind.FAILED, message=message)

    @property
    def is_found(self) -> bool:
        return self.kind == OutcomeKind.FOUND

    @property
    def is_failed(self) -> bool:
        return self.kind == OutcomeKind.FAILED

    def value_or_none(self) -> Any:
        return self.value if self.is_found else None
