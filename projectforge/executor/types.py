from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Awaitable, Callable, Optional, Union

Action = Callable[[Any], Union[None, Awaitable[None]]]
SkipPredicate = Callable[[Any], bool]


class Severity(str, Enum):
    FATAL = "fatal"
    ADVISORY = "advisory"


class TaskStatus(str, Enum):
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    WARNED = "warned"
    SKIPPED = "skipped"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class Task:
    """One named unit of work.

    ``action`` and ``skip`` both receive the run context. An action may be a
    plain function or a coroutine function; raising marks the task failed.
    """

    title: str
    action: Action
    skip: Optional[SkipPredicate] = None
    deps: tuple[str, ...] = ()
    severity: Severity = Severity.FATAL

    def with_severity(self, severity: Severity) -> Task:
        return replace(self, severity=severity)


@dataclass(frozen=True)
class TaskEvent:
    title: str
    status: TaskStatus
    message: str = ""


@dataclass(frozen=True)
class TaskResult:
    title: str
    status: TaskStatus
    message: str = ""
    duration_s: float = 0.0


@dataclass(frozen=True)
class RunResult:
    order: list[str]
    results: dict[str, TaskResult]
    failed: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    cancelled: list[str] = field(default_factory=list)
    warned: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed

    @property
    def message(self) -> str:
        if not self.failed:
            return ""
        return self.results[self.failed[0]].message
