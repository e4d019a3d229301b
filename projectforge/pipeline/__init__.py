from .context import Clients, Options, RunContext
from .errors import CommandError, PipelineError, ServiceError, ValidationError
from .shell import CommandRunner
from .tasks import TASKS, build_tasks

__all__ = [
    "TASKS",
    "build_tasks",
    "Clients",
    "CommandRunner",
    "Options",
    "RunContext",
    "PipelineError",
    "CommandError",
    "ServiceError",
    "ValidationError",
]
