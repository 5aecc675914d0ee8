"""Introspection of managed types.

The lifecycle never reads class metadata directly; it asks an
:class:`AttributeInspector`. :class:`MarkerInspector` answers from the
decorators and annotations in :mod:`caretaker.markers`; other inspectors may
answer from explicit registration, configuration files or anything else.
"""

from typing import (
    Annotated,
    Any,
    Callable,
    Optional,
    Protocol,
    get_args,
    get_origin,
    get_type_hints,
)

from caretaker.domain import ComponentDescriptor, DependencySlot, Phase
from caretaker.errors import DependencyError
from caretaker.markers import HOOK_ATTRIBUTE, INJECT, component_metadata

__all__ = ["AttributeInspector", "MarkerInspector", "describe"]


class AttributeInspector(Protocol):
    """Answers questions about managed types and their instances."""

    def is_managed(self, component_type: type) -> bool: ...

    def declared_name(self, component_type: type) -> Optional[str]: ...

    def dependency_slots(self, component_type: type) -> list[DependencySlot]: ...

    def hook_for(self, instance: Any, phase: Phase) -> Optional[Callable[[], Any]]: ...


class MarkerInspector:
    """Inspector reading the metadata written by :mod:`caretaker.markers`."""

    def is_managed(self, component_type: type) -> bool:
        return bool(component_metadata(component_type).get("managed", False))

    def declared_name(self, component_type: type) -> Optional[str]:
        return component_metadata(component_type).get("name")

    def dependency_slots(self, component_type: type) -> list[DependencySlot]:
        """Return the ``Annotated[Target, INJECT]`` annotations of a class.

        Annotations of base classes come first, followed by the class's own,
        each in declaration order.

        Raises:
            DependencyError: If an annotation cannot be evaluated, or an
                injected annotation's target is not a class.
        """
        try:
            hints = get_type_hints(component_type, include_extras=True)
        except NameError as e:
            raise DependencyError(
                f"Unable to evaluate annotations of {component_type!r}: {e}"
            ) from e

        return [
            _make_slot(component_type, slot_name, annotation)
            for slot_name, annotation in hints.items()
            if _is_injected(annotation)
        ]

    def hook_for(self, instance: Any, phase: Phase) -> Optional[Callable[[], Any]]:
        """Return the first method marked for ``phase``, bound to ``instance``.

        The class is searched before its bases, each in definition order.
        """
        for klass in type(instance).__mro__:
            for attribute_name, value in vars(klass).items():
                func = getattr(value, "__func__", value)
                if getattr(func, HOOK_ATTRIBUTE, None) is phase:
                    return getattr(instance, attribute_name)
        return None


def describe(component_type: type, inspector: AttributeInspector) -> ComponentDescriptor:
    """Build the descriptor of a managed type from what ``inspector`` reports."""
    return ComponentDescriptor(
        component_type,
        inspector.declared_name(component_type),
        tuple(inspector.dependency_slots(component_type)),
    )


def _is_injected(annotation: Any) -> bool:
    if get_origin(annotation) is not Annotated:
        return False
    _, *metadata = get_args(annotation)
    return any(m is INJECT for m in metadata)


def _make_slot(component_type: type, slot_name: str, annotation: Any) -> DependencySlot:
    target_type, *_ = get_args(annotation)
    if not isinstance(target_type, type):
        raise DependencyError(
            f"Dependency <{slot_name}> of component <{component_type.__qualname__}> "
            f"must be annotated with a class, not {target_type!r}"
        )
    return DependencySlot(slot_name, target_type)
