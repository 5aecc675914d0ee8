"""Domain models used throughout the container."""

import enum
from dataclasses import dataclass, field
from typing import Any, Callable, FrozenSet, Optional

__all__ = [
    "DependencySlot",
    "ComponentDescriptor",
    "LifecycleState",
    "Phase",
    "canonical_name",
]


def canonical_name(component_type: type) -> str:
    """Return the fully qualified name of a type, e.g. ``"app.db.Database"``."""
    return f"{component_type.__module__}.{component_type.__qualname__}"


@dataclass(frozen=True)
class DependencySlot:
    """A named attribute of a component which receives another component.

    Attributes:
        slot_name: The attribute assigned during injection.
        target_type: The managed type whose instance fills the slot.
    """

    slot_name: str
    target_type: type


@dataclass(frozen=True)
class ComponentDescriptor:
    """Describes one manageable type.

    Attributes:
        component_type: The managed type. This is the descriptor's identity.
        name: Optional explicit component name.
        slots: Dependency slots in declaration order.
        factory: Zero-argument callable producing an instance; defaults to the
            type itself.
    """

    component_type: type
    name: Optional[str] = None
    slots: tuple[DependencySlot, ...] = ()
    factory: Optional[Callable[[], Any]] = field(default=None, compare=False)

    @property
    def resolved_name(self) -> str:
        return self.name or canonical_name(self.component_type)

    @property
    def dependencies(self) -> FrozenSet[type]:
        return frozenset(slot.target_type for slot in self.slots)

    def construct(self) -> Any:
        factory = self.factory or self.component_type
        return factory()


class LifecycleState(enum.Enum):
    """States of a :class:`~caretaker.lifecycle.LifecycleManager`."""

    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"
    STARTED = "started"
    STOPPED = "stopped"


class Phase(enum.Enum):
    """Hook kinds invoked by the lifecycle."""

    START = "start"
    STOP = "stop"

    def __str__(self) -> str:
        return self.value
