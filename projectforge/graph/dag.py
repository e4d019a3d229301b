from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterable, Protocol

from .types import CycleError, DuplicateTaskError, UnknownDependencyError, UnknownTaskError


class _Visit(Enum):
    UNVISITED = auto()
    VISITING = auto()
    VISITED = auto()


class Node(Protocol):
    title: str
    deps: tuple[str, ...]


@dataclass(frozen=True)
class TaskGraph:
    """Dependency graph over task titles.

    Ordering is topological with declaration order as the tie-breaker, so a
    list whose deps only point backwards runs exactly in the order written.
    """

    _titles: tuple[str, ...]
    _deps: dict[str, tuple[str, ...]]

    @classmethod
    def from_tasks(cls, tasks: Iterable[Node]) -> TaskGraph:
        titles: list[str] = []
        deps: dict[str, tuple[str, ...]] = {}
        for task in tasks:
            if task.title in deps:
                raise DuplicateTaskError(task.title)
            titles.append(task.title)
            deps[task.title] = tuple(task.deps)

        for title in titles:
            for dep in deps[title]:
                if dep not in deps:
                    raise UnknownDependencyError(title, dep)

        graph = cls(tuple(titles), deps)
        # Fail on cycles at construction rather than at first run.
        graph.topo_order()
        return graph

    def titles(self) -> list[str]:
        return list(self._titles)

    def deps_of(self, title: str) -> tuple[str, ...]:
        if title not in self._deps:
            raise UnknownTaskError(title)
        return self._deps[title]

    def topo_order(self) -> list[str]:
        return self._toposort(set(self._deps))

    def subgraph_order(self, target: str) -> list[str]:
        if target not in self._deps:
            raise UnknownTaskError(target)

        needed: set[str] = set()
        worklist: list[str] = [target]

        while worklist:
            title = worklist.pop()
            if title in needed:
                continue
            needed.add(title)
            for dep in self._deps[title]:
                worklist.append(dep)

        return self._toposort(needed)

    def _toposort(self, universe: set[str]) -> list[str]:
        state = {title: _Visit.UNVISITED for title in universe}
        out: list[str] = []
        stack: list[str] = []
        pos: dict[str, int] = {}

        def visit(title: str) -> None:
            if state[title] == _Visit.VISITING:
                start = pos[title]
                raise CycleError(stack[start:] + [title])
            if state[title] == _Visit.VISITED:
                return

            state[title] = _Visit.VISITING
            pos[title] = len(stack)
            stack.append(title)

            for dep in self._deps[title]:
                if dep in state:
                    visit(dep)

            stack.pop()
            pos.pop(title)
            state[title] = _Visit.VISITED
            out.append(title)

        for title in self._titles:
            if title in universe:
                visit(title)

        return out
