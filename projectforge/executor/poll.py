"""Long-poll an external operation until it reaches a terminal status."""

from __future__ import annotations

import asyncio
import inspect
import logging
import time
from enum import Enum
from typing import Any, Awaitable, Callable, Optional, TypeVar, Union

logger = logging.getLogger(__name__)

S = TypeVar("S")


class PollOutcome(Enum):
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class PollError(Exception):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)


class PollFailedError(PollError):
    def __init__(self, status: Any):
        super().__init__(f"Operation reached a failure status: {status!r}")
        self.status = status


class PollTimeoutError(PollError):
    def __init__(self, timeout: float, status: Any):
        super().__init__(
            f"Operation still in progress after {timeout:g}s, last status: {status!r}"
        )
        self.timeout = timeout
        self.status = status


def classify_by(
    succeeded: set[str], failed: set[str]
) -> Callable[[str], PollOutcome]:
    """Build a classifier from explicit success and failure status sets.

    Any status in neither set counts as still in progress.
    """

    def classify(status: str) -> PollOutcome:
        if status in succeeded:
            return PollOutcome.SUCCEEDED
        if status in failed:
            return PollOutcome.FAILED
        return PollOutcome.PENDING

    return classify


async def poll_until_terminal(
    fetch_status: Callable[[], Union[S, Awaitable[S]]],
    classify: Callable[[S], PollOutcome],
    *,
    delay: float = 30.0,
    timeout: Optional[float] = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    clock: Callable[[], float] = time.monotonic,
) -> S:
    """Fetch a status until ``classify`` reports it terminal.

    Returns the success-terminal status. Raises ``PollFailedError`` on a
    failure-terminal status and ``PollTimeoutError`` once ``timeout`` seconds
    have elapsed without a terminal status. ``timeout=None`` polls forever.
    """
    deadline = None if timeout is None else clock() + timeout
    attempt = 0

    while True:
        attempt += 1
        status = fetch_status()
        if inspect.isawaitable(status):
            status = await status

        outcome = classify(status)
        logger.debug("poll attempt %d: %r -> %s", attempt, status, outcome.value)

        if outcome is PollOutcome.SUCCEEDED:
            return status
        if outcome is PollOutcome.FAILED:
            raise PollFailedError(status)

        if deadline is not None and clock() + delay > deadline:
            raise PollTimeoutError(timeout, status)

        logger.info("Still in progress (%r), checking again in %gs", status, delay)
        await sleep(delay)
