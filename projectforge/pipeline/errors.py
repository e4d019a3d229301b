from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Sequence


class PipelineError(Exception):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)


class ValidationError(PipelineError):
    def __init__(self, message: str, problems: Sequence[str] = ()):
        if problems:
            message = message + "\n" + "\n".join(f"    * {p}" for p in problems)
        super().__init__(message)
        self.problems = list(problems)


class CommandError(PipelineError):
    def __init__(self, args: Sequence[str], returncode: int, stderr: str = ""):
        command = " ".join(args)
        detail = stderr.strip()
        message = f"Command failed with exit code {returncode}: {command}"
        if detail:
            message += f"\n{detail}"
        super().__init__(message)
        self.command = list(args)
        self.returncode = returncode
        self.stderr = stderr


class ServiceError(PipelineError):
    def __init__(self, service: str, detail: object):
        super().__init__(f"{service} error: {detail}")
        self.service = service


@contextmanager
def service_errors(service: str, *errors: type[BaseException]) -> Iterator[None]:
    """Re-raise the given SDK exception types as ``ServiceError``."""
    try:
        yield
    except errors as exc:
        raise ServiceError(service, exc) from exc
