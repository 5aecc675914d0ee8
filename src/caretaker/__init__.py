"""Caretaker lifecycle container.

Caretaker is a small inversion-of-control container. It discovers the classes
marked as managed within a namespace, orders them by their declared
dependencies, instantiates each one with its no-argument constructor, injects
its dependencies into annotated attributes, and then runs their start and stop
hooks.

Key Features:
    - Declarative component marking with decorators and type annotations
    - Dependency ordering by topological sort, with cycle and missing
      dependency detection
    - Two-pass wiring: construct everything, then inject
    - A guarded initialize -> start -> stop lifecycle
    - Pluggable discovery and inspection

Basic Usage:
    >>> from typing import Annotated
    >>> from caretaker import INJECT, LifecycleManager, managed, on_start
    >>>
    >>> @managed
    ... class Database:
    ...     @on_start
    ...     def connect(self): ...
    >>>
    >>> @managed
    ... class UserService:
    ...     database: Annotated[Database, INJECT]
    >>>
    >>> manager = LifecycleManager("myapp.components")
    >>> manager.initialize()
    >>> manager.start()

The package consists of several modules:
    - graph: Dependency graph model
    - sorting: Topological sort of dependency graphs
    - wiring: Instantiation and injection of components
    - lifecycle: The lifecycle manager
    - markers: Decorators and annotations marking components
    - inspection: Introspection of managed types
    - discovery: Discovery of candidate types in a namespace
    - settings: Lifecycle configuration
    - domain: Core domain models
    - errors: Container exceptions
"""

from caretaker.discovery import ComponentDiscovery, ModuleDiscovery, StaticDiscovery
from caretaker.domain import ComponentDescriptor, DependencySlot, LifecycleState, Phase
from caretaker.errors import (
    ComponentConstructionError,
    CyclicOrUnresolvableDependencyError,
    DependencyError,
    DuplicateComponentNameError,
    LifecycleError,
    LifecycleHookError,
    NamespaceResolutionError,
    UnresolvedDependencyError,
)
from caretaker.inspection import AttributeInspector, MarkerInspector
from caretaker.lifecycle import LifecycleManager
from caretaker.markers import INJECT, managed, on_start, on_stop
from caretaker.settings import LifecycleSettings
from caretaker.sorting import topological_sort
from caretaker.wiring import WiringManager

__all__ = [
    "AttributeInspector",
    "ComponentConstructionError",
    "ComponentDescriptor",
    "ComponentDiscovery",
    "CyclicOrUnresolvableDependencyError",
    "DependencyError",
    "DependencySlot",
    "DuplicateComponentNameError",
    "INJECT",
    "LifecycleError",
    "LifecycleHookError",
    "LifecycleManager",
    "LifecycleSettings",
    "LifecycleState",
    "MarkerInspector",
    "ModuleDiscovery",
    "NamespaceResolutionError",
    "Phase",
    "StaticDiscovery",
    "UnresolvedDependencyError",
    "WiringManager",
    "managed",
    "on_start",
    "on_stop",
    "topological_sort",
]
