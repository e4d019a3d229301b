from .dag import TaskGraph
from .types import (
    CycleError,
    DuplicateTaskError,
    GraphError,
    UnknownDependencyError,
    UnknownTaskError,
)

__all__ = [
    "TaskGraph",
    "GraphError",
    "CycleError",
    "DuplicateTaskError",
    "UnknownDependencyError",
    "UnknownTaskError",
]
