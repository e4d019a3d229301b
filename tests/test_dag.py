import pytest

from projectforge.executor.types import Task
from projectforge.graph.dag import TaskGraph
from projectforge.graph.types import (
    CycleError,
    DuplicateTaskError,
    UnknownDependencyError,
    UnknownTaskError,
)


def _noop(ctx) -> None:
    return None


def _tasks(layout: dict[str, list[str]]) -> list[Task]:
    """
    layout: title -> deps list, in declaration order
    """
    return [Task(title, _noop, deps=tuple(deps)) for title, deps in layout.items()]


def _graph(layout: dict[str, list[str]]) -> TaskGraph:
    return TaskGraph.from_tasks(_tasks(layout))


def test_topo_chain_keeps_declaration_order():
    g = _graph(
        {
            "Git init": [],
            "Git add": ["Git init"],
            "Git commit": ["Git add"],
        }
    )
    assert g.topo_order() == ["Git init", "Git add", "Git commit"]


def test_topo_linear_chain_declared_backwards():
    g = _graph(
        {
            "A": ["B"],
            "B": ["C"],
            "C": [],
        }
    )
    assert g.topo_order() == ["C", "B", "A"]


def test_topo_diamond_is_deterministic():
    g = _graph(
        {
            "A": ["B", "C"],
            "B": ["D"],
            "C": ["D"],
            "D": [],
        }
    )
    assert g.topo_order() == ["D", "B", "C", "A"]


def test_topo_independent_tasks_keep_declaration_order():
    g = _graph(
        {
            "B": [],
            "A": [],
        }
    )
    assert g.topo_order() == ["B", "A"]


def test_cycle_detected_at_construction():
    with pytest.raises(CycleError):
        _graph(
            {
                "A": ["B"],
                "B": ["A"],
            }
        )


def test_cycle_error_includes_closed_loop_path():
    with pytest.raises(CycleError) as e:
        _graph({"A": ["B"], "B": ["A"]})

    cycle = e.value.cycle
    assert len(cycle) >= 3
    assert cycle[0] == cycle[-1]


def test_unknown_dependency_raises():
    with pytest.raises(UnknownDependencyError) as e:
        _graph({"A": ["missing"]})

    assert e.value.title == "A"
    assert e.value.dep == "missing"


def test_duplicate_title_raises():
    with pytest.raises(DuplicateTaskError):
        TaskGraph.from_tasks([Task("A", _noop), Task("A", _noop)])


def test_subgraph_order_target_includes_only_transitive_deps():
    g = _graph(
        {
            "D": [],
            "B": ["D"],
            "C": ["D"],
            "A": ["B", "C"],
            "E": [],
        }
    )
    assert g.subgraph_order("B") == ["D", "B"]
    assert g.subgraph_order("C") == ["D", "C"]
    assert g.subgraph_order("A") == ["D", "B", "C", "A"]


def test_subgraph_order_leaf_returns_itself():
    g = _graph({"A": []})
    assert g.subgraph_order("A") == ["A"]


def test_subgraph_order_unknown_target_raises():
    g = _graph({"A": []})
    with pytest.raises(UnknownTaskError):
        g.subgraph_order("nope")


def test_deps_of_and_membership():
    g = _graph({"A": [], "B": ["A"]})
    assert "B" in g
    assert "Z" not in g
    assert g.deps_of("B") == ("A",)
    assert g.titles() == ["A", "B"]
