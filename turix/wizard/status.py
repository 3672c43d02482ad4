"""Connection test status."""

from dataclasses import dataclass
from enum import Enum


class StatusKind(str, Enum):
    NOT_TESTED = "not_tested"
    TESTING = "testing"
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class ConnectionStatus:
    """Outcome of a connection test. Only FAILED carries a reason."""
    kind: StatusKind = StatusKind.NOT_TESTED
    reason: str = ""

    @classmethod
    def not_tested(cls) -> "ConnectionStatus":
        return cls(StatusKind.NOT_TESTED)

    @classmethod
    def testing(cls) -> "ConnectionStatus":
        return cls(StatusKind.TESTING)

    @classmethod
    def success(cls) -> "ConnectionStatus":
        return cls(StatusKind.SUCCESS)

    @classmethod
    def failed(cls, reason: str) -> "ConnectionStatus":
        return cls(StatusKind.FAILED, reason or "Unknown error")

    @property
    def is_success(self) -> bool:
        return self.kind is StatusKind.SUCCESS

    @property
    def is_testing(self) -> bool:
        return self.kind is StatusKind.TESTING

    @property
    def is_failed(self) -> bool:
        return self.kind is StatusKind.FAILED

    @property
    def message(self) -> str:
        if self.kind is StatusKind.FAILED:
            return f"Failed: {self.reason}"
        return {
            StatusKind.NOT_TESTED: "Not tested",
            StatusKind.TESTING: "Testing...",
            StatusKind.SUCCESS: "Connected",
        }[self.kind]
