"""Exceptions raised while resolving, wiring and running managed components."""

from typing import Any, Iterable, Mapping, Optional

__all__ = [
    "LifecycleError",
    "NamespaceResolutionError",
    "DependencyError",
    "DuplicateComponentNameError",
    "CyclicOrUnresolvableDependencyError",
    "UnresolvedDependencyError",
    "ComponentConstructionError",
    "LifecycleHookError",
]


class LifecycleError(Exception):
    """Base class for every error raised by the container."""

    pass


class NamespaceResolutionError(LifecycleError):
    """Raised when discovery cannot access a namespace at all."""

    def __init__(self, namespace: str, reason: Optional[str] = None):
        message = f"Unable to resolve namespace '{namespace}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.namespace = namespace


class DependencyError(LifecycleError):
    """Raised when a component's dependency cannot be resolved."""

    pass


class DuplicateComponentNameError(DependencyError):
    """Raised when two components in one namespace resolve to the same name."""

    def __init__(self, name: str):
        super().__init__(f"Component for '{name}' already exists")
        self.name = name


class CyclicOrUnresolvableDependencyError(DependencyError):
    """Raised when a topological sort cannot make progress.

    Attributes:
        remaining: The nodes that could not be ordered.
        missing: Mapping from a node to the dependencies it references that are
            not part of the graph.
    """

    def __init__(
        self,
        remaining: Iterable[Any],
        missing: Optional[Mapping[Any, Iterable[Any]]] = None,
    ):
        self.remaining = frozenset(remaining)
        self.missing = {
            source: frozenset(targets) for source, targets in (missing or {}).items()
        }
        if self.missing:
            message = f"Missing dependencies: {_describe_missing(self.missing)}"
        else:
            message = f"Unresolvable dependencies: {_describe(self.remaining)}"
        super().__init__(message)


class UnresolvedDependencyError(DependencyError):
    """Raised when a dependency slot has no registered instance to inject."""

    pass


class ComponentConstructionError(LifecycleError):
    """Raised when a component's zero-argument construction fails."""

    def __init__(self, component: str, reason: Optional[BaseException] = None):
        message = f"Unable to construct component '{component}'"
        if reason is not None:
            message = f"{message}: {reason!r}"
        super().__init__(message)
        self.component = component


class LifecycleHookError(LifecycleError):
    """Raised when a start or stop hook fails."""

    def __init__(self, component: str, phase: Any, reason: Optional[BaseException] = None):
        message = f"{phase} hook of component '{component}' failed"
        if reason is not None:
            message = f"{message}: {reason!r}"
        super().__init__(message)
        self.component = component
        self.phase = phase


def _describe(nodes: Iterable[Any]) -> str:
    return "{" + ", ".join(sorted(_node_name(node) for node in nodes)) + "}"


def _describe_missing(missing: Mapping[Any, Iterable[Any]]) -> str:
    return ", ".join(
        f"{_node_name(source)} -> {_describe(targets)}"
        for source, targets in sorted(
            missing.items(), key=lambda item: _node_name(item[0])
        )
    )


def _node_name(node: Any) -> str:
    if isinstance(node, type):
        return f"{node.__module__}.{node.__qualname__}"
    return str(node)
