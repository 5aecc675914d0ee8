"""Instantiation and injection of components within a single namespace."""

import logging
from types import MappingProxyType
from typing import Any, Iterable, Mapping

from caretaker.domain import ComponentDescriptor
from caretaker.errors import (
    ComponentConstructionError,
    DuplicateComponentNameError,
    UnresolvedDependencyError,
)

__all__ = ["WiringManager"]

logger = logging.getLogger(__name__)


class WiringManager:
    """
    Build components from descriptors and fill their dependency slots.

    Wiring runs in two passes over the ordered descriptors: every component is
    constructed and registered by name first, then each slot is assigned the
    registered instance of its target type. Injection therefore never depends
    on construction order, but both passes follow the given order.

    The manager owns the instances it creates; :attr:`components` is a
    read-only view of them by name.
    """

    def __init__(self):
        self._components: dict[str, Any] = {}
        self._names_by_type: dict[type, str] = {}

    @property
    def components(self) -> Mapping[str, Any]:
        return MappingProxyType(self._components)

    def wire(self, ordered_descriptors: Iterable[ComponentDescriptor]) -> list[Any]:
        """Instantiate the descriptors in order and inject their dependencies.

        Args:
            ordered_descriptors: Descriptors, dependencies first.

        Returns:
            The wired instances, in registration order.

        Raises:
            ComponentConstructionError: If a component's factory raises.
            DuplicateComponentNameError: If two descriptors share a resolved name.
            UnresolvedDependencyError: If a slot's target type was not wired.
        """
        descriptors = list(ordered_descriptors)
        try:
            for descriptor in descriptors:
                self._instantiate(descriptor)

            for descriptor in descriptors:
                self._inject(descriptor)
        except Exception:
            self._components.clear()
            self._names_by_type.clear()
            raise

        return list(self._components.values())

    def _instantiate(self, descriptor: ComponentDescriptor) -> None:
        name = descriptor.resolved_name
        if name in self._components:
            raise DuplicateComponentNameError(name)

        try:
            instance = descriptor.construct()
        except Exception as e:
            raise ComponentConstructionError(name, e) from e

        self._components[name] = instance
        self._names_by_type[descriptor.component_type] = name
        logger.debug("Instantiated component '%s'", name)

    def _inject(self, descriptor: ComponentDescriptor) -> None:
        owner = self._components[descriptor.resolved_name]

        for slot in descriptor.slots:
            dependency_name = self._names_by_type.get(slot.target_type)
            if dependency_name is None:
                raise UnresolvedDependencyError(
                    f"Dependency {slot.target_type!r} of component "
                    f"'{descriptor.resolved_name}' not found"
                )

            # Assigning through object skips frozen dataclasses and custom setters.
            object.__setattr__(owner, slot.slot_name, self._components[dependency_name])
            logger.debug(
                "Injected '%s' into %s.%s",
                dependency_name,
                descriptor.resolved_name,
                slot.slot_name,
            )
