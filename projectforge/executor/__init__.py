from .executor import Executor
from .poll import (
    PollError,
    PollFailedError,
    PollOutcome,
    PollTimeoutError,
    classify_by,
    poll_until_terminal,
)
from .types import RunResult, Severity, Task, TaskEvent, TaskResult, TaskStatus

__all__ = [
    "Executor",
    "RunResult",
    "Severity",
    "Task",
    "TaskEvent",
    "TaskResult",
    "TaskStatus",
    "PollError",
    "PollFailedError",
    "PollOutcome",
    "PollTimeoutError",
    "classify_by",
    "poll_until_terminal",
]
