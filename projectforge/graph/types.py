class GraphError(Exception):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)


class CycleError(GraphError):
    def __init__(self, cycle: list[str]):
        super().__init__("Cycle detected: " + " -> ".join(cycle))
        self.cycle = cycle


class DuplicateTaskError(GraphError):
    def __init__(self, title: str):
        super().__init__(f"Duplicate task title: {title}")
        self.title = title


class UnknownDependencyError(GraphError):
    def __init__(self, title: str, dep: str):
        super().__init__(f"Task '{title}' has unknown dependency '{dep}'")
        self.title = title
        self.dep = dep


class UnknownTaskError(GraphError):
    def __init__(self, title: str):
        super().__init__(f"Task not found: {title}")
        self.title = title
